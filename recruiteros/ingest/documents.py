"""
Résumé document loading.

Reads résumé files from disk into `Document` values for the analyzer.
The analyzer accepts PDFs and images only; the media type is guessed
from the file name.
"""

from __future__ import annotations

import logging
import mimetypes
import os
from typing import Iterable, List

from ..pipeline.schema import Document

logger = logging.getLogger(__name__)


class UnsupportedDocumentError(ValueError):
    """The file is neither a PDF nor an image."""


def is_supported_media_type(media_type: str) -> bool:
    return media_type == "application/pdf" or media_type.startswith("image/")


def load_document(file_path: str) -> Document:
    """Read a résumé file into a `Document`.

    Args:
        file_path: Path to a ``.pdf`` file or an image (``.png``,
            ``.jpg``, ...).

    Returns:
        The document with its bytes, base name and media type.

    Raises:
        FileNotFoundError: If the file does not exist.
        UnsupportedDocumentError: If the file type is not a PDF or image.
    """
    media_type = mimetypes.guess_type(file_path)[0] or ""
    if not is_supported_media_type(media_type):
        raise UnsupportedDocumentError(
            f"{file_path}: unsupported type '{media_type or 'unknown'}'; expected a PDF or an image"
        )
    with open(file_path, "rb") as f:
        data = f.read()
    return Document(name=os.path.basename(file_path), media_type=media_type, data=data)


def load_documents(paths: Iterable[str]) -> List[Document]:
    """Load several résumé files, skipping those that cannot be used.

    Unreadable or unsupported files are logged and left out; the
    remaining documents keep the order of ``paths``.
    """
    documents: List[Document] = []
    for path in paths:
        try:
            documents.append(load_document(path))
        except (OSError, UnsupportedDocumentError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
    return documents
