"""JSON key-value store used by the storage-backed (offline) storefront variant.

Each key holds one JSON document. Reads of a missing key can seed it with a
default so the first access persists the initial catalog or stock table.
"""

import copy
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from storefront.core.logging_config import get_logger

logger = get_logger(__name__)

PRODUCTS_KEY = "bike_sale_products"
INVENTORY_KEY = "bike_sale_inventory"


class LocalStore:
    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._lock = threading.RLock()
        self._data: Dict[str, Any] = {}
        if self.path and self.path.exists():
            with self.path.open("r", encoding="utf-8") as fh:
                self._data = json.load(fh)
            logger.info(f"Loaded local store from {self.path} ({len(self._data)} keys)")

    def get(self, key: str, seed: Optional[Callable[[], Any]] = None) -> Any:
        """Return a copy of the value at ``key``; seed and persist it first if absent."""
        with self._lock:
            if key not in self._data:
                if seed is None:
                    return None
                self._data[key] = seed()
                self._flush()
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            # Round-trip through JSON so only serializable documents are stored
            self._data[key] = json.loads(json.dumps(value, default=str))
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def _flush(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2, default=str)
            os.replace(tmp, self.path)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
