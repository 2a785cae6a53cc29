import os
import re
from pathlib import Path
from typing import Optional

from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.service_interfaces import KeyValueStoreInterface

logger = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileKeyValueStore(KeyValueStoreInterface):
    """Stores each key as a UTF-8 file inside ``base_dir``."""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        logger.info("File key/value store ready", extra={"base_dir": str(self.base_dir)})

    def _path_for(self, key: str) -> Path:
        return self.base_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        # readers never see a half-written blob
        os.replace(tmp_path, path)

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
