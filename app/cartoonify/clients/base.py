"""
Base Generator class for Cartoonify.
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

import requests

from ..images import ImageArtifact

logger = logging.getLogger(__name__)


class TargetSize(str, Enum):
    """Requested output resolution, mapped by each generator to its own values."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: Union[str, "TargetSize"]) -> "TargetSize":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown target size: {value}. Use small, medium, large or auto.")


@dataclass(frozen=True)
class GenerationRequest:
    """A single image-edit call."""
    artifact: ImageArtifact
    prompt: str
    target_size: TargetSize = TargetSize.AUTO


@dataclass
class GeneratorResult:
    """Result from an AI image generation request."""
    data: Optional[bytes]
    status_code: Optional[int] = None
    error: Optional[str] = None
    request_info: str = ""
    response_info: str = ""

    @property
    def success(self) -> bool:
        return self.data is not None


class BaseGenerator:
    """Abstract base class for image generators."""

    name = "base"

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def is_configured(self) -> bool:
        return not self.get_missing_config()

    def get_missing_config(self) -> list:
        """Return list of missing configuration variables."""
        return []

    def generate(self, request: GenerationRequest) -> GeneratorResult:
        """
        Submit one image-edit request and return the generated image.
        Must be implemented by subclasses.

        Args:
            request: Normalized image, prompt and target size

        Returns:
            GeneratorResult with the generated PNG bytes, or with an error
            and the upstream status code when the call failed. A result with
            neither data nor error means the call succeeded without output.
        """
        raise NotImplementedError("Subclasses must implement generate")


def error_message(response: requests.Response) -> str:
    """Pull a readable message out of an upstream error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    if isinstance(error, str):
        return error
    return response.text or f"HTTP {response.status_code}"


def read_image_item(item: Dict, timeout: Optional[float] = None) -> Optional[bytes]:
    """
    Decode one entry of an images API 'data' list.

    Accepts base64 output ('b64_json') or a URL to download.
    """
    if item.get("b64_json"):
        try:
            return base64.b64decode(item["b64_json"])
        except (binascii.Error, ValueError):
            logger.error("Upstream returned undecodable b64_json")
            return None
    if item.get("url"):
        logger.info(f"Result is URL, downloading from {item['url']}...")
        img_resp = requests.get(item["url"], timeout=timeout)
        img_resp.raise_for_status()
        return img_resp.content
    return None
