"""
Persistence Adapter for Cartoonify.
Best-effort storage of generated images; a failed upload never fails the request.
"""
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Optional

from .images import MIME_EXTENSIONS

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


@dataclass(frozen=True)
class StoredReference:
    """Durable pointer to persisted bytes."""
    key: str
    url: Optional[str] = None


def storage_name(name_hint: Optional[str] = None) -> str:
    """
    Build the file stem for a stored object.

    A draft key only names the object; nothing looks up or reuses an
    earlier preview stored under the same name.
    """
    if name_hint:
        cleaned = re.sub(r"[^A-Za-z0-9_-]", "_", name_hint.strip())[:MAX_NAME_LENGTH]
        if cleaned.strip("_"):
            return cleaned
    return uuid.uuid4().hex


class PersistenceAdapter:
    def __init__(self, storage_service):
        """
        Args:
            storage_service: StorageService instance, or None to disable storage
        """
        self.storage = storage_service

    @property
    def enabled(self) -> bool:
        return self.storage is not None and self.storage.enabled

    def persist(
        self,
        data: bytes,
        folder: str,
        mime_type: str = "image/png",
        name_hint: Optional[str] = None,
        enabled: bool = True,
    ) -> Optional[StoredReference]:
        """
        Upload bytes under '<folder>/<name>.<ext>'.

        Returns:
            StoredReference, or None if storage is unavailable, disabled
            for this call, or the upload failed
        """
        if not enabled or not self.enabled:
            return None

        extension = MIME_EXTENSIONS.get(mime_type, "bin")
        key = f"{folder.strip('/')}/{storage_name(name_hint)}.{extension}"

        try:
            url = self.storage.upload_file(key, data, content_type=mime_type)
        except Exception as e:
            logger.warning(f"Storage upload failed for {key}, returning inline bytes: {e}")
            return None

        logger.info(f"Stored {len(data)} bytes at {key}")
        return StoredReference(key=key, url=url)
