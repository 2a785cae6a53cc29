from typing import Optional

from invoice_tracker_api.application.interfaces.service_interfaces import KeyValueStoreInterface


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Process-local key/value store."""

    def __init__(self):
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
