from typing import Optional
from urllib.parse import quote

from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.service_interfaces import StorageServiceInterface

logger = get_logger(__name__)


class InMemoryInvoiceStorageService(StorageServiceInterface):
    """In-memory implementation of invoice storage service."""
    def __init__(self, base_url: str = "memory://invoices"):
        self.base_url = base_url
        self._files: dict[str, bytes] = {}

    async def upload_file_as_bytes(self, blob_bytes: bytes, blob_name: str,
                                   content_type: Optional[str] = None,
                                   overwrite: bool = True) -> str:
        """Upload file bytes to storage and return the file URL."""
        if not overwrite and blob_name in self._files:
            raise FileExistsError(f"Blob already exists: {blob_name}")
        self._files[blob_name] = bytes(blob_bytes)
        logger.info(f" - Stored in-memory blob: {blob_name}, {len(blob_bytes)} bytes")
        return f"{self.base_url}/{quote(blob_name)}"

    async def download_file(self, blob_name: str) -> bytes | None:
        return self._files.get(blob_name)

    async def delete_file(self, blob_name: str) -> None:
        """Delete file from storage."""
        self._files.pop(blob_name, None)

    async def close(self) -> None:
        self._files.clear()
