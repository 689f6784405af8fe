"""
OpenAI Generator for Cartoonify.
Uses the OpenAI images edit endpoint for photo stylization.
"""
import logging
import time
from typing import Dict, Optional

import requests

from .base import BaseGenerator, GenerationRequest, GeneratorResult, TargetSize, error_message, read_image_item

logger = logging.getLogger(__name__)


class OpenAIGenerator(BaseGenerator):
    """OpenAI image editor (gpt-image-1 by default)."""

    name = "openai"

    ENV_API_KEY = "OPENAI_API_KEY"

    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_MODEL = "gpt-image-1"

    # gpt-image-1 only accepts these edit sizes; 512 and below are rejected
    SIZES = {
        TargetSize.SMALL: "1024x1024",
        TargetSize.MEDIUM: "1024x1536",
        TargetSize.LARGE: "1536x1024",
        TargetSize.AUTO: "auto",
    }

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ):
        super().__init__(timeout)
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/images/edits"

    def get_missing_config(self) -> list:
        return [] if self.api_key else [self.ENV_API_KEY]

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def form_fields(self, request: GenerationRequest) -> Dict[str, str]:
        return {
            "model": self.model,
            "prompt": request.prompt,
            "size": self.SIZES[request.target_size],
            "n": "1",
        }

    def generate(self, request: GenerationRequest) -> GeneratorResult:
        """Submit one edit request; never retried."""
        artifact = request.artifact
        fields = self.form_fields(request)

        start_time = time.time()
        req_info = f"POST {self.endpoint}\nModel: {self.model}\nSize: {fields['size']}\nPrompt: {request.prompt[:50]}..."
        resp_info = ""

        try:
            # Filename extension and content type must agree with the real image type
            files = {
                "image": (artifact.filename, artifact.data, artifact.mime_type)
            }

            logger.info(f"Submitting {self.name} edit request for {artifact.filename} ({fields['size']})...")
            response = requests.post(
                self.endpoint, headers=self.headers(), files=files, data=fields, timeout=self.timeout
            )

            latency = time.time() - start_time
            resp_info = f"Status: {response.status_code}\nLatency: {latency:.2f}s"

            if not response.ok:
                message = error_message(response)
                logger.error(f"{self.name} API Error ({response.status_code}): {message}")
                return GeneratorResult(None, response.status_code, message, req_info, resp_info)

            try:
                result = response.json()
            except ValueError:
                logger.error(f"{self.name} returned malformed JSON")
                return GeneratorResult(None, None, "Malformed JSON from image API", req_info, resp_info)

            if not isinstance(result, dict):
                result = {}
            items = result.get("data") or []
            if not isinstance(items, list):
                logger.error(f"{self.name} returned a malformed data field: {type(items).__name__}")
                return GeneratorResult(None, None, "Malformed response from image API", req_info, resp_info)
            result_data = None
            if items and isinstance(items[0], dict):
                result_data = read_image_item(items[0], self.timeout)

            if result_data:
                return GeneratorResult(data=result_data, request_info=req_info, response_info=resp_info)

            logger.error(f"No image in response: {list(result.keys())}")
            return GeneratorResult(None, response.status_code, None, req_info, resp_info + "\nError: No image returned")

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"Error downloading {self.name} result: {e}")
            return GeneratorResult(None, status, f"HTTP Error: {e}", req_info, resp_info)

        except requests.exceptions.RequestException as e:
            logger.error(f"API Error processing {artifact.filename}: {e}")
            return GeneratorResult(None, None, f"Request failed: {e}", req_info, resp_info)
