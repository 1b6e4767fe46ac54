"""
Document ingestion.

Loads résumé PDFs and images from disk for the analyzer.
"""

from .documents import UnsupportedDocumentError, load_document, load_documents  # noqa: F401
