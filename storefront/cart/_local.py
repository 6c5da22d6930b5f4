"""
Local scoped storage — synchronous key/value storage for cart documents.

Keys are identity storage keys: "cart-guest" or "cart-<user id>".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class LocalStorage(Protocol):
    """
    Synchronous scoped storage.

    Note: Implementations may raise OSError; the persistence adapter
    handles it.
    """

    def get(self, key: str) -> str | None:
        """Stored value, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Storage — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryLocalStorage:
    """In-memory storage. Lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)


# ═══════════════════════════════════════════════════════════════════════════════
# File Storage — one file per key
# ═══════════════════════════════════════════════════════════════════════════════


class FileLocalStorage:
    """
    Directory-backed storage: `<root>/<percent-encoded key>.json`.

    Example:
        storage = FileLocalStorage(Path.home() / ".storefront")
        storage.set("cart-guest", '{"cartItems": []}')
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        # Percent-encoding is injective: distinct keys never share a file
        return self._root / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        # Atomic replace
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)
        logger.debug("Wrote %s (%d bytes)", path, len(value))


__all__ = (
    "LocalStorage",
    "MemoryLocalStorage",
    "FileLocalStorage",
)
