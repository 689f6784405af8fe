"""
Azure Generator for Cartoonify.
Uses an Azure OpenAI image deployment for photo stylization.

Required Environment Variables:
    AZURE_OPENAI_ENDPOINT: Full images edit URL of the deployment
    AZURE_OPENAI_API_KEY: Azure OpenAI API key
    AZURE_OPENAI_MODEL: Model name (default: gpt-image-1)
"""
import logging
from typing import Dict, Optional

from .openai import OpenAIGenerator

logger = logging.getLogger(__name__)


class AzureGenerator(OpenAIGenerator):
    """Azure OpenAI image editor; same edit contract as OpenAI."""

    name = "azure"

    # Environment variable names (consistent with Azure SDK conventions)
    ENV_ENDPOINT = "AZURE_OPENAI_ENDPOINT"
    ENV_API_KEY = "AZURE_OPENAI_API_KEY"

    def __init__(
        self,
        endpoint: Optional[str],
        api_key: Optional[str],
        model: str = OpenAIGenerator.DEFAULT_MODEL,
        timeout: Optional[float] = None,
    ):
        super().__init__(api_key=api_key, model=model, base_url=endpoint or "", timeout=timeout)
        self.azure_endpoint = endpoint

    @property
    def endpoint(self) -> str:
        return self.azure_endpoint or ""

    def get_missing_config(self) -> list:
        """Return list of missing configuration variables."""
        missing = []
        if not self.azure_endpoint:
            missing.append(self.ENV_ENDPOINT)
        if not self.api_key:
            missing.append(self.ENV_API_KEY)
        return missing

    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "api-key": self.api_key  # Azure OpenAI uses api-key header
        }
