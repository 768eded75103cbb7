from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional


class TTLMap:
    """In-memory TTL map for small caches (JWKS keys).

    - get(key) -> Optional[Any]
    - set(key, value, ttl_seconds)
    - clear()
    """

    def __init__(self, maxsize: int = 64, clock: Callable[[], float] = time.monotonic):
        self.maxsize = maxsize
        self._clock = clock
        self._data: Dict[str, Any] = {}
        self._exp: Dict[str, float] = {}

    def get(self, key: str) -> Optional[Any]:
        exp = self._exp.get(key)
        if exp is None:
            return None
        if self._clock() >= exp:
            self._data.pop(key, None)
            self._exp.pop(key, None)
            return None
        return self._data.get(key)

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        if key not in self._data and len(self._data) >= self.maxsize:
            try:
                old_key = next(iter(self._data))
            except StopIteration:
                pass
            else:
                del self._data[old_key]
                self._exp.pop(old_key, None)
        self._data[key] = value
        self._exp[key] = self._clock() + ttl_seconds

    def clear(self) -> None:
        self._data.clear()
        self._exp.clear()
