"""
Cartoonify AI Generator Clients
"""
from .base import BaseGenerator, GenerationRequest, GeneratorResult, TargetSize
from .openai import OpenAIGenerator
from .azure import AzureGenerator
from .hf_space import HFSpaceGenerator


def get_generator(settings) -> BaseGenerator:
    """
    Factory function to get the configured generator.

    Args:
        settings: Settings instance; 'provider' is 'openai', 'azure' or 'hf_space'

    Returns:
        BaseGenerator instance
    """
    provider = settings.provider.lower()
    if provider == "openai":
        return OpenAIGenerator(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.upstream_timeout,
        )
    elif provider == "azure":
        return AzureGenerator(
            endpoint=settings.azure_endpoint,
            api_key=settings.azure_api_key,
            model=settings.azure_model,
            timeout=settings.upstream_timeout,
        )
    elif provider == "hf_space":
        return HFSpaceGenerator(
            space_url=settings.hf_space_url,
            token=settings.hf_token,
            upscale_url=settings.hf_upscale_url,
            timeout=settings.upstream_timeout,
        )
    else:
        raise ValueError(f"Unknown provider: {provider}. Use 'openai', 'azure' or 'hf_space'.")

__all__ = [
    "get_generator",
    "BaseGenerator",
    "GenerationRequest",
    "GeneratorResult",
    "TargetSize",
    "OpenAIGenerator",
    "AzureGenerator",
    "HFSpaceGenerator",
]
