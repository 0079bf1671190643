"""
Media component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class FileStorePort(Protocol):
    def save(self, name: str, data: bytes) -> str:
        """Save bytes and return the stored path (relative to the store root)."""
        ...

    def get(self, path: str) -> bytes:
        """Retrieve bytes by path. Raises FileNotFoundError."""
        ...

    def delete(self, path: str) -> None: ...
