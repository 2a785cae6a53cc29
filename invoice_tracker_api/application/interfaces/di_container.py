"""Dependency Injection Container."""
from invoice_tracker_api.application.interfaces.service_interfaces import (
    AuthProviderInterface,
    InvoiceRepositoryInterface,
    KeyValueStoreInterface,
    StorageServiceInterface,
    TextExtractionServiceInterface,
)
from invoice_tracker_api.application.services.category_registry import CategoryRegistry
from invoice_tracker_api.application.services.invoice_manager import InvoiceManager
from invoice_tracker_api.infrastructure.auth.in_memory_auth_provider import InMemoryAuthProvider
from invoice_tracker_api.infrastructure.repositories.file_key_value_store import FileKeyValueStore
from invoice_tracker_api.infrastructure.repositories.in_memory_invoice_storage import InMemoryInvoiceStorageService
from invoice_tracker_api.infrastructure.repositories.in_memory_key_value_store import InMemoryKeyValueStore
from invoice_tracker_api.infrastructure.repositories.local_invoice_repository import LocalInvoiceRepository
from invoice_tracker_api.infrastructure.extraction.plain_text_extraction_service import PlainTextExtractionService
from shared.config.settings import settings
from shared.utils.logging_config import get_logger

logger = get_logger(__name__)


class DIContainer:
    """Simple dependency injection container."""

    def __init__(self):
        self._singletons = {}
        self._setup_services()

    def _setup_services(self):

        logger.info("Setting up Singleton DI Container services...")

        if settings.repository_type == "file":
            self._singletons[KeyValueStoreInterface] = FileKeyValueStore(settings.local_storage_dir)
        else:
            self._singletons[KeyValueStoreInterface] = InMemoryKeyValueStore()

        self._singletons[InvoiceRepositoryInterface] = LocalInvoiceRepository(
            self._singletons[KeyValueStoreInterface],
            storage_key=settings.invoices_storage_key
        )

        if settings.storage_type == "azure_blob":
            from invoice_tracker_api.infrastructure.repositories.invoice_storage_service import InvoiceStorageService
            self._singletons[StorageServiceInterface] = InvoiceStorageService()
        else:
            self._singletons[StorageServiceInterface] = InMemoryInvoiceStorageService()

        if settings.extraction_type == "azure_document_intelligence":
            from invoice_tracker_api.infrastructure.extraction.document_intelligence_extraction_service import (
                DocumentIntelligenceExtractionService,
            )
            self._singletons[TextExtractionServiceInterface] = DocumentIntelligenceExtractionService()
        else:
            self._singletons[TextExtractionServiceInterface] = PlainTextExtractionService()

        self._singletons[AuthProviderInterface] = InMemoryAuthProvider()
        self._singletons[CategoryRegistry] = CategoryRegistry()
        self._singletons[InvoiceManager] = InvoiceManager(
            repository=self._singletons[InvoiceRepositoryInterface],
            storage_service=self._singletons[StorageServiceInterface],
            extraction_service=self._singletons[TextExtractionServiceInterface],
            category_registry=self._singletons[CategoryRegistry],
        )

    def get_service(self, service_type):
        """Get a service instance by type."""
        if service_type in self._singletons:
            return self._singletons[service_type]
        raise ValueError(f"Service {service_type} not registered")

# Global container instance
_container = DIContainer()


async def init_services() -> None:
    """Attach the invoice manager to the authentication provider."""
    manager: InvoiceManager = _container.get_service(InvoiceManager)
    await manager.init(_container.get_service(AuthProviderInterface))


async def close_all_services() -> None:
    """Dispose the invoice manager and close services that hold resources."""
    _container.get_service(InvoiceManager).dispose()

    for service in _container._singletons.values():
        if hasattr(service, "close") and callable(service.close):
            await service.close()

    if settings.storage_type == "azure_blob" or settings.extraction_type == "azure_document_intelligence":
        from invoice_tracker_api.infrastructure.azure_credential_manager import get_credential_manager
        await get_credential_manager().close()


def get_invoice_manager() -> InvoiceManager:
    """Dependency injection function for the invoice manager."""
    return _container.get_service(InvoiceManager)

def get_auth_provider() -> InMemoryAuthProvider:
    """Dependency injection function for the authentication provider."""
    return _container.get_service(AuthProviderInterface)

def get_category_registry() -> CategoryRegistry:
    """Dependency injection function for the category registry."""
    return _container.get_service(CategoryRegistry)
