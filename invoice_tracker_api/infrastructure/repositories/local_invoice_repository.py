import json

from shared.models.invoice import Invoice
from shared.utils.exceptions import PersistenceException
from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.service_interfaces import (
    InvoiceRepositoryInterface,
    KeyValueStoreInterface,
)

logger = get_logger(__name__)


class LocalInvoiceRepository(InvoiceRepositoryInterface):
    """
    Keeps each user's invoice collection as one JSON array under its own key.

    The key is ``{storage_key}:{user_id}``. There is no partial update and no
    concurrency control: every save replaces the user's whole blob and the
    last writer wins.
    """

    def __init__(self, store: KeyValueStoreInterface, storage_key: str = "invoices"):
        self.store = store
        self.storage_key = storage_key

    def key_for(self, user_id: str) -> str:
        if not user_id:
            raise ValueError("user_id is required to address an invoice collection")
        return f"{self.storage_key}:{user_id}"

    def load(self, user_id: str) -> list[Invoice]:
        """
        Load the persisted collection of ``user_id``.

        Returns an empty list when the blob is missing or cannot be parsed.
        Parse failures are logged and never raised. Invoices owned by another
        user are dropped.
        """
        key = self.key_for(user_id)
        try:
            raw = self.store.get_item(key)
        except Exception as e:
            logger.warning(
                "Failed to read invoice blob",
                extra={"storage_key": key, "error": str(e)}
            )
            return []

        if raw is None:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            invoices = [Invoice.from_dict(item) for item in data]
        except Exception as e:
            logger.warning(
                "Stored invoices could not be parsed, starting empty",
                extra={"storage_key": key, "error": str(e)}
            )
            return []

        owned = [invoice for invoice in invoices if invoice.user_id == user_id]
        if len(owned) != len(invoices):
            logger.warning(
                "Dropped invoices owned by another user",
                extra={"storage_key": key, "dropped": len(invoices) - len(owned)}
            )

        logger.info(
            "Invoices loaded",
            extra={"storage_key": key, "count": len(owned)}
        )
        return owned

    def save(self, user_id: str, invoices: list[Invoice]) -> None:
        """
        Overwrite the persisted collection of ``user_id``.

        Amounts are written as decimal strings so the round trip is exact.

        Raises:
            PersistenceException: If serialization or the store write fails
        """
        key = self.key_for(user_id)
        try:
            payload = json.dumps([invoice.to_dict(decimal_as_str=True) for invoice in invoices])
            self.store.set_item(key, payload)
        except Exception as e:
            logger.error(
                "Failed to persist invoices",
                extra={"storage_key": key, "count": len(invoices), "error": str(e)},
                exc_info=True
            )
            raise PersistenceException(f"Failed to persist invoices: {e}") from e

    def clear(self, user_id: str) -> None:
        self.store.remove_item(self.key_for(user_id))
