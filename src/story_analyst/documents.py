from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Callable

import docx2txt
import pandas as pd
import pdfplumber

from .models import MAX_DOCUMENT_CHARS, DocumentExcerpt

logger = logging.getLogger(__name__)


class UnsupportedDocumentError(ValueError):
    """Raised when no extractor handles a file extension."""


def _read_pdf(path: Path) -> str:
    parts: list[str] = []
    with pdfplumber.open(path) as pdf:
        for i, page in enumerate(pdf.pages):
            text = page.extract_text()
            if text:
                parts.append(text)
            else:
                logger.debug("No text extracted from page %d of %s", i + 1, path.name)
    return "\n\n".join(parts) or "[No text could be extracted from PDF]"


def _read_docx(path: Path) -> str:
    return docx2txt.process(str(path)) or ""


def _read_xlsx(path: Path) -> str:
    sheets = pd.read_excel(path, sheet_name=None)
    if not sheets:
        return "[Spreadsheet contains no sheets]"
    return "\n\n".join(f"--- Sheet: {name} ---\n{df.to_string()}" for name, df in sheets.items())


def _read_csv(path: Path) -> str:
    return pd.read_csv(path).to_string()


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="ignore")


_EXTRACTORS: dict[str, Callable[[Path], str]] = {
    ".pdf": _read_pdf,
    ".docx": _read_docx,
    ".xlsx": _read_xlsx,
    ".csv": _read_csv,
    ".txt": _read_text,
    ".md": _read_text,
    ".json": _read_text,
}


def mime_label(path: Path) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed:
        return guessed
    ext = path.suffix.lower().lstrip(".")
    return ext or "unknown"


def extract_text(path: Path) -> str:
    """Extract plain text from a document. Raises on unsupported types."""
    extractor = _EXTRACTORS.get(path.suffix.lower())
    if extractor is None:
        raise UnsupportedDocumentError(f"Unsupported file type: {path.suffix.lower() or '(none)'}")
    return extractor(path)


def load_document(path: Path, *, max_chars: int = MAX_DOCUMENT_CHARS) -> DocumentExcerpt:
    """Build a DocumentExcerpt for a file.

    Extraction problems never fail the analysis: the excerpt then carries an
    explanatory placeholder instead of document text.
    """
    try:
        content = extract_text(path)
    except UnsupportedDocumentError as exc:
        logger.warning("%s (%s)", exc, path.name)
        content = f"[{exc}. File uploaded but content could not be extracted.]"
    except Exception as exc:  # noqa: BLE001
        logger.error("Extraction failed for %s", path.name, exc_info=True)
        content = f"Extraction failed: {type(exc).__name__}: {exc}"

    return DocumentExcerpt(name=path.name, mime_label=mime_label(path), content=content[:max_chars])
