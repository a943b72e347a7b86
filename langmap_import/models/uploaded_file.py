from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

"""File handles accepted by parse_language_csv.

The parser only needs ``name``, ``size`` and a ``read()`` returning the whole
content. UploadedFile wraps bytes already in memory (a web upload), PathFile
reads lazily from disk.
"""

__all__ = [
    "CSVFile",
    "UploadedFile",
    "PathFile",
]


class CSVFile(Protocol):
    name: str
    size: int

    def read(self) -> bytes | str: ...


@dataclass(frozen=True)
class UploadedFile:
    """In-memory upload. ``size`` is the encoded byte length."""
    name: str
    content: bytes | str

    @property
    def size(self) -> int:
        if isinstance(self.content, str):
            return len(self.content.encode("utf-8"))
        return len(self.content)

    def read(self) -> bytes | str:
        return self.content


@dataclass(frozen=True)
class PathFile:
    """File on disk; content is read only when the parser asks for it."""
    path: Path
    name: str
    size: int

    @classmethod
    def from_path(cls, path: Path) -> PathFile:
        return cls(path=path, name=path.name, size=path.stat().st_size)

    def read(self) -> bytes:
        return self.path.read_bytes()
