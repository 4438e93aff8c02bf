import pytest

from text_extraction import TextExtractionError, extract_text_from_bytes, extract_text_from_file, mime_type_for


def test_plain_text(tmp_path):
    path = tmp_path / "resume.txt"
    path.write_text("Jane Doe\nPython developer\n", encoding="utf-8")
    assert "Python developer" in extract_text_from_file(path)


def test_bytes_upload_cleans_up(tmp_path, monkeypatch):
    monkeypatch.setattr("tempfile.tempdir", str(tmp_path))
    assert extract_text_from_bytes(b"Jane Doe", "cv.TXT") == "Jane Doe"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("filename", ["resume.pages", "resume.doc", "resume"])
def test_unsupported_types_explain_how_to_fix(filename):
    with pytest.raises(TextExtractionError, match="PDF, DOCX or TXT"):
        extract_text_from_bytes(b"whatever", filename)


def test_blank_file_is_rejected():
    with pytest.raises(TextExtractionError, match="No readable text"):
        extract_text_from_bytes(b"   \n  ", "blank.txt")


def test_broken_pdf_is_rejected():
    with pytest.raises(TextExtractionError):
        extract_text_from_bytes(b"not really a pdf", "resume.pdf")


def test_mime_types():
    assert mime_type_for("cv.PDF") == "application/pdf"
    assert mime_type_for("cv.txt") == "text/plain"
    assert mime_type_for("cv.xyz") == "application/octet-stream"
