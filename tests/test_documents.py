"""Tests for résumé document loading."""

from __future__ import annotations

import pytest  # type: ignore

from recruiteros.ingest import UnsupportedDocumentError, load_document, load_documents


def test_load_pdf(tmp_path) -> None:
    path = tmp_path / "Jane_Doe.pdf"
    path.write_bytes(b"%PDF-1.4 test")
    document = load_document(str(path))
    assert document.name == "Jane_Doe.pdf"
    assert document.media_type == "application/pdf"
    assert document.data == b"%PDF-1.4 test"
    assert document.display_name == "Jane_Doe"


def test_load_image(tmp_path) -> None:
    path = tmp_path / "scan.png"
    path.write_bytes(b"\x89PNG")
    assert load_document(str(path)).media_type == "image/png"


def test_unsupported_type(tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")
    with pytest.raises(UnsupportedDocumentError):
        load_document(str(path))


def test_load_documents_skips_bad_files(tmp_path) -> None:
    good = tmp_path / "a.pdf"
    good.write_bytes(b"%PDF")
    other = tmp_path / "b.jpg"
    other.write_bytes(b"\xff\xd8")
    bad = tmp_path / "c.docx"
    bad.write_bytes(b"PK")
    documents = load_documents([str(good), str(bad), str(tmp_path / "missing.pdf"), str(other)])
    assert [d.name for d in documents] == ["a.pdf", "b.jpg"]
