"""
DocChat - Data Model
=====================
Small immutable value types passed between components.

``Document``
    Text plus a time-derived identifier.  Lives only for the duration of
    one indexing call; persistence belongs to the vector store.
``SearchHit``
    One ranked neighbour returned by the vector store.
``FileKind``
    Extension dispatch for the text extractor.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum

# ── Type aliases ───────────────────────────────────────────────────────
Vector = list[float]


def current_millis() -> int:
    """Wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class Document:
    document_id: str
    content: str

    @classmethod
    def from_text(cls, text: str) -> Document:
        return cls(document_id=f"doc_{current_millis()}", content=text)


@dataclass(frozen=True)
class SearchHit:
    content: str
    score: float

    def format(self) -> str:
        """Render as ``"<content> (similarity: 0.123)"``."""
        return f"{self.content} (similarity: {self.score:.3f})"


class FileKind(Enum):
    """Every upload resolves to exactly one of these."""

    PLAIN_TEXT = "txt"
    PDF = "pdf"
    RICH_TEXT = "docx"
    LEGACY_DOC = "doc"
    UNKNOWN = ""

    @classmethod
    def from_extension(cls, extension: str) -> FileKind:
        try:
            kind = cls(extension.lower())
        except ValueError:
            return cls.UNKNOWN
        return kind

    @classmethod
    def from_filename(cls, filename: str) -> FileKind:
        """Classify by the text after the last ``.``; no dot means UNKNOWN."""
        if "." not in filename:
            return cls.UNKNOWN
        return cls.from_extension(filename.rsplit(".", 1)[1])


def extension_of(filename: str) -> str:
    """Lower-cased text after the last ``.`` (the whole name when there is none)."""
    return filename.rsplit(".", 1)[-1].lower()
