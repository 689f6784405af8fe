import logging
from pathlib import Path
from typing import Optional, Union

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

logger = logging.getLogger(__name__)


class StorageService:
    def __init__(self, settings):
        # Backend chosen by settings: Azure Blob, local filesystem or disabled
        self.mode = settings.storage_backend.upper()
        self.public_base_url = settings.public_base_url
        self.local_storage_path = Path(settings.local_storage_path)
        self.container_client = None
        self._container_ready = False

        if self.mode == "AZURE":
            if not settings.storage_connection_string:
                raise ValueError("AZURE_STORAGE_CONNECTION_STRING must be set for the azure storage backend.")
            logger.info("Initializing Azure Blob Storage...")
            blob_service_client = BlobServiceClient.from_connection_string(settings.storage_connection_string)
            self.container_client = blob_service_client.get_container_client(settings.container_name)
        elif self.mode == "LOCAL":
            logger.info(f"Using LOCAL storage mode at {self.local_storage_path}")
        else:
            self.mode = "NONE"
            logger.info("Storage disabled; results are returned inline.")

    @property
    def enabled(self) -> bool:
        return self.mode != "NONE"

    def _ensure_container(self):
        if self._container_ready:
            return
        try:
            self.container_client.create_container()
        except ResourceExistsError:
            pass
        self._container_ready = True

    def _local_path(self, filename: str) -> Path:
        root = self.local_storage_path.resolve()
        file_path = (root / filename).resolve()
        if root not in file_path.parents:
            raise ValueError(f"Invalid storage key: {filename}")
        return file_path

    def upload_file(self, filename: str, data: bytes, content_type: str = "application/octet-stream") -> Optional[str]:
        """
        Store bytes under a key.

        Returns:
            A fetchable URL, or None when the backend has no public URL
        """
        if self.mode == "AZURE":
            self._ensure_container()
            blob_client = self.container_client.get_blob_client(filename)
            blob_client.upload_blob(
                data, overwrite=True, content_settings=ContentSettings(content_type=content_type)
            )
            return blob_client.url
        elif self.mode == "LOCAL":
            file_path = self._local_path(filename)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(data)
            if self.public_base_url:
                return f"{self.public_base_url.rstrip('/')}/files/{filename}"
            return None
        raise RuntimeError("Storage is disabled")

    def get_file(self, filename: str) -> Union[bytes, None]:
        if self.mode == "AZURE":
            blob_client = self.container_client.get_blob_client(filename)
            try:
                download_stream = blob_client.download_blob()
                return download_stream.readall()
            except ResourceNotFoundError:
                return None
        elif self.mode == "LOCAL":
            try:
                file_path = self._local_path(filename)
            except ValueError:
                return None
            if file_path.is_file():
                with open(file_path, "rb") as f:
                    return f.read()
        return None
