"""
Service interfaces for dependency injection.
"""
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Union

from invoice_tracker_api.domain.uploaded_file_dto import UploadedFileDTO
from shared.models.auth import AuthState
from shared.models.invoice import Invoice

AuthStateCallback = Callable[[AuthState], Union[None, Awaitable[None]]]


class KeyValueStoreInterface(ABC):
    """String key/value store holding whole serialized blobs."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store the value, replacing anything stored under the key."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove the key. Removing an absent key is a no-op."""
        pass


class InvoiceRepositoryInterface(ABC):
    """Reads and writes a user's whole invoice collection at once."""

    @abstractmethod
    def load(self, user_id: str) -> list[Invoice]:
        """Return the collection owned by user_id; empty when missing or unreadable."""
        pass

    @abstractmethod
    def save(self, user_id: str, invoices: list[Invoice]) -> None:
        """Overwrite the collection owned by user_id."""
        pass


class StorageServiceInterface(ABC):
    """Abstract base class for storage service implementations."""

    @abstractmethod
    async def upload_file_as_bytes(self, blob_bytes: bytes, blob_name: str,
                                   content_type: Optional[str] = None,
                                   overwrite: bool = True) -> str:
        """Upload file bytes to storage and return the public file URL."""
        pass

    @abstractmethod
    async def delete_file(self, blob_name: str) -> None:
        """Delete file from storage."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any resources held by the service."""
        pass


class TextExtractionServiceInterface(ABC):
    """Abstract base class for document text extraction."""

    @abstractmethod
    async def extract_text(self, uploaded_file: UploadedFileDTO) -> str:
        """Return the text content of the document."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any resources held by the service."""
        pass


class AuthProviderInterface(ABC):
    """Source of authentication state changes."""

    @abstractmethod
    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        """Register a callback and return a function that unregisters it."""
        pass

    @property
    @abstractmethod
    def state(self) -> AuthState:
        """Current authentication state."""
        pass
