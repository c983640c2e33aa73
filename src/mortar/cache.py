"""Memoisation of built instances keyed by type, variant and parameters.

Two requests hit the same entry only when their type, variant and the
canonical serialisation of their parameters are identical. Parameter maps
that differ only in key insertion order share an entry.
"""

import dataclasses
import hashlib
import logging
import threading
from typing import Any, Callable, Mapping, Optional

from mortar.domain import TypeId, type_key

__all__ = ["stable_hash", "CacheKey", "InstanceCache"]

CacheKey = tuple[str, str, Optional[str]]
"""(type key, variant, parameter hash or ``None`` when no parameters were given)."""

logger = logging.getLogger(__name__)


def stable_hash(params: Mapping[str, Any]) -> str:
    """Deterministic digest of a parameter map.

    Example:
        >>> stable_hash({"a": 1, "b": [2, 3]}) == stable_hash({"b": [2, 3], "a": 1})
        True
    """
    return hashlib.md5(_canonical(params).encode("utf-8"), usedforsecurity=False).hexdigest()


def _canonical(value: Any) -> str:
    if isinstance(value, Mapping):
        items = sorted((_canonical(k), _canonical(v)) for k, v in value.items())
        return "{" + ",".join(f"{k}:{v}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        open_, close = ("[", "]") if isinstance(value, list) else ("(", ")")
        return open_ + ",".join(_canonical(v) for v in value) + close
    if isinstance(value, (set, frozenset)):
        return "set(" + ",".join(sorted(_canonical(v) for v in value)) + ")"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        cls = type(value)
        fields = ",".join(
            f"{f.name}={_canonical(getattr(value, f.name))}" for f in dataclasses.fields(value)
        )
        return f"{cls.__module__}.{cls.__qualname__}({fields})"
    return f"{type(value).__qualname__}:{value!r}"


class InstanceCache:
    """Stores built instances until explicitly cleared."""

    def __init__(self):
        self._instances: dict[CacheKey, Any] = {}
        self._lock = threading.RLock()

    @staticmethod
    def key(type_id: TypeId, variant: str, params: Optional[Mapping[str, Any]] = None) -> CacheKey:
        return (type_key(type_id), variant, stable_hash(params) if params else None)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def get(self, key: CacheKey) -> Optional[Any]:
        return self._instances.get(key)

    def store(self, key: CacheKey, instance: Any) -> Any:
        """Store ``instance`` unless the key is already taken, returning whichever is cached."""
        with self._lock:
            return self._instances.setdefault(key, instance)

    def get_or_build(
        self,
        type_id: TypeId,
        variant: str,
        params: Mapping[str, Any],
        build: Callable[[], Any],
    ) -> Any:
        """Return the cached instance for the inputs, building and storing it on a miss."""
        key = self.key(type_id, variant, params)
        if key in self._instances:
            logger.debug("Cache hit for %s", key)
            return self._instances[key]

        logger.debug("Cache miss for %s", key)
        return self.store(key, build())

    def clear(self):
        with self._lock:
            self._instances.clear()
