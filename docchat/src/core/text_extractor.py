"""
DocChat - Text Extractor
=========================
Turns an uploaded file into a single text string.

Supported formats
-----------------
• ``.txt``  → UTF-8 decode (malformed bytes replaced, never rejected).
• ``.pdf``  → PyMuPDF, page texts joined with ``\\n``, result stripped.
• ``.docx`` → python-docx, paragraphs and table rows in body order.

Rejected formats
----------------
• ``.doc``  → ``UnsupportedFormatError`` asking for a ``.docx`` conversion.
• anything else → ``UnsupportedFormatError``.

Every parser works on in-memory bytes and releases what it opens in a
``with`` block, so handles are closed on success and on error alike.

Usage:
    from docchat.src.core.text_extractor import extract_text
    text = extract_text("notes.pdf", pdf_bytes)
"""

from __future__ import annotations

import io
from pathlib import Path

import docx
import fitz  # PyMuPDF
from docx.table import Table

from docchat.src.core.exceptions import InvalidArgumentError, UnsupportedFormatError
from docchat.src.core.models import FileKind, extension_of
from docchat.src.utils.logger import get_logger

logger = get_logger(__name__)


# ── Public API ─────────────────────────────────────────────────────────

def extract_text(filename: str | None, content: bytes) -> str:
    """
    Extract the text of an uploaded file.

    Args:
        filename: Original filename; only its extension is used.
        content:  Raw file bytes.

    Returns:
        The document text.

    Raises:
        InvalidArgumentError:   ``filename`` is missing or empty.
        UnsupportedFormatError: legacy ``.doc`` or an unknown extension.
    """
    if not filename:
        raise InvalidArgumentError("File name is required")

    kind = FileKind.from_filename(filename)
    logger.debug("Extracting %s as %s (%d bytes)", filename, kind.name, len(content))

    if kind is FileKind.PLAIN_TEXT:
        return _read_plain_text(content)
    if kind is FileKind.PDF:
        return _read_pdf(content)
    if kind is FileKind.RICH_TEXT:
        return _read_docx(content)
    if kind is FileKind.LEGACY_DOC:
        raise UnsupportedFormatError("Legacy .doc format not supported. Please use .docx format.", extension="doc")

    extension = extension_of(filename)
    raise UnsupportedFormatError(f"Unsupported file type: {extension}", extension=extension)


def extract_text_from_path(path: str | Path) -> str:
    """Read a local file and extract its text."""
    filepath = Path(path)
    return extract_text(filepath.name, filepath.read_bytes())


# ── Format readers ─────────────────────────────────────────────────────

def _read_plain_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def _read_pdf(content: bytes) -> str:
    with fitz.open(stream=content, filetype="pdf") as pdf:
        pages = [page.get_text() for page in pdf]
    logger.debug("Read %d PDF page(s)", len(pages))
    return "\n".join(pages).strip()


def _read_docx(content: bytes) -> str:
    with io.BytesIO(content) as stream:
        document = docx.Document(stream)
        lines: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                lines.extend(_table_rows(block))
            else:
                lines.append(block.text)
    return "\n".join(lines)


def _table_rows(table: Table) -> list[str]:
    return ["\t".join(cell.text for cell in row.cells) for row in table.rows]
