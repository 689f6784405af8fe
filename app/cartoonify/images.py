"""
Input Normalizer for Cartoonify.
Turns a data-URL, a remote URL or raw base64 + MIME into an ImageArtifact.
"""
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Optional
from urllib.parse import urlparse

import requests

from .errors import InvalidInput, MissingInput, UnsupportedMediaType

logger = logging.getLogger(__name__)

# Accepted image types and the extension each one is sent with
MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/webp": "webp",
}

MIME_ALIASES = {"image/jpg": "image/jpeg"}

EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}

GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

DATA_URL_PATTERN = re.compile(r"^data:([\w.+-]+/[\w.+-]+);base64,([A-Za-z0-9+/=]+)$")


@dataclass(frozen=True)
class ImageArtifact:
    """A decoded image ready to be sent to a generator."""
    data: bytes
    mime_type: str

    @property
    def file_extension(self) -> str:
        return MIME_EXTENSIONS[self.mime_type]

    @property
    def filename(self) -> str:
        return f"source.{self.file_extension}"

    def to_data_url(self) -> str:
        return to_data_url(self.data, self.mime_type)


def to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def canonical_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """
    Return the canonical form of an accepted MIME type, or None.

    Parameters such as '; charset=binary' are ignored and 'image/jpg'
    is treated as 'image/jpeg'.
    """
    if not mime_type:
        return None
    value = mime_type.split(";", 1)[0].strip().lower()
    value = MIME_ALIASES.get(value, value)
    return value if value in MIME_EXTENSIONS else None


def decode_base64(payload: str) -> bytes:
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInput(f"Invalid base64 payload: {e}")
    if not data:
        raise InvalidInput("Image payload is empty")
    return data


def parse_data_url(data_url: str) -> ImageArtifact:
    """Parse a strict 'data:<mime>;base64,<payload>' string."""
    match = DATA_URL_PATTERN.match((data_url or "").strip())
    if not match:
        raise InvalidInput("Invalid base64 (expected data:image/*;base64,...)")

    declared = match.group(1)
    mime_type = canonical_mime_type(declared)
    if mime_type is None:
        raise UnsupportedMediaType(f"Unsupported image type: {declared}")

    return ImageArtifact(data=decode_base64(match.group(2)), mime_type=mime_type)


def mime_type_from_url(url: str) -> Optional[str]:
    suffix = PurePosixPath(urlparse(url).path).suffix.lower()
    return EXTENSION_MIME_TYPES.get(suffix)


def fetch_remote_image(url: str, timeout: Optional[float] = None) -> ImageArtifact:
    """
    Download an image from an http(s) URL.

    Args:
        url: Remote image location
        timeout: Optional socket timeout in seconds

    Returns:
        ImageArtifact with the response body

    Raises:
        InvalidInput: bad scheme, network failure or non-2xx response
        UnsupportedMediaType: content type outside the accepted set
    """
    if urlparse(url).scheme not in ("http", "https"):
        raise InvalidInput("sourceUrl must be an http(s) URL")

    logger.info(f"Fetching source image from {url}")
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise InvalidInput(f"Fetch sourceUrl failed: {e}")

    if not 200 <= response.status_code < 300:
        raise InvalidInput(f"Fetch sourceUrl failed: HTTP {response.status_code}")

    declared = response.headers.get("Content-Type", "") or ""
    mime_type = canonical_mime_type(declared)
    if mime_type is None:
        if declared.split(";", 1)[0].strip().lower() not in GENERIC_CONTENT_TYPES:
            raise UnsupportedMediaType(f"Unsupported image type: {declared}")
        mime_type = mime_type_from_url(url)
        if mime_type is None:
            raise UnsupportedMediaType("Could not determine image type of sourceUrl")

    if not response.content:
        raise InvalidInput("Fetched image is empty")

    return ImageArtifact(data=response.content, mime_type=mime_type)


def parse_raw_base64(payload: str, mime_type: Optional[str]) -> ImageArtifact:
    if not mime_type:
        raise InvalidInput("mimeType is required with imageData")
    canonical = canonical_mime_type(mime_type)
    if canonical is None:
        raise UnsupportedMediaType(f"Unsupported image type: {mime_type}")
    return ImageArtifact(data=decode_base64(payload.strip()), mime_type=canonical)


def normalize_input(
    image_base64: Optional[str] = None,
    source_url: Optional[str] = None,
    image_data: Optional[str] = None,
    mime_type: Optional[str] = None,
    fetch: Callable[[str], ImageArtifact] = fetch_remote_image,
) -> ImageArtifact:
    """
    Produce an ImageArtifact from whichever input the caller supplied.

    When several are present the first one in the order data-URL,
    remote URL, raw base64 is used and the others are ignored.
    """
    if image_base64:
        return parse_data_url(image_base64)
    if source_url:
        return fetch(source_url)
    if image_data:
        return parse_raw_base64(image_data, mime_type)
    raise MissingInput("Missing image input: provide imageBase64, sourceUrl or imageData")
