# text_extraction.py
# Plain-text extraction from uploaded resume files (PDF, DOCX, TXT).

import os
import tempfile
from pathlib import Path

import docx2txt
from pdfminer.high_level import extract_text as pdf_extract_text

SUPPORTED_SUFFIXES = {".pdf", ".docx", ".txt"}

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".doc": "application/msword",
    ".txt": "text/plain",
    ".rtf": "text/rtf",
}

GUIDANCE = "Please re-upload your resume as a PDF, DOCX or TXT file."


class TextExtractionError(ValueError):
    """The file could not be turned into text; the message tells the user what to do."""


def mime_type_for(filename: str) -> str:
    return MIME_TYPES.get(Path(filename or "").suffix.lower(), "application/octet-stream")


def extract_text_from_file(path: Path) -> str:
    """Extract text from PDF, DOCX, or TXT files"""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise TextExtractionError(f"Unsupported file type '{suffix or 'none'}'. {GUIDANCE}")
    try:
        if suffix == ".pdf":
            text = pdf_extract_text(str(path))
        elif suffix == ".docx":
            text = docx2txt.process(str(path))
        else:
            text = path.read_text(encoding="utf-8", errors="ignore")
    except Exception as e:
        raise TextExtractionError(f"Could not extract text from {path.name}: {e}. {GUIDANCE}") from e

    if not text or not text.strip():
        raise TextExtractionError(f"No readable text found in {path.name}. {GUIDANCE}")
    return text


def extract_text_from_bytes(content: bytes, filename: str) -> str:
    """Write an upload to a temp file and extract it."""
    suffix = Path(filename or "").suffix
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(content)
        tmp_path = Path(tmp.name)
    try:
        return extract_text_from_file(tmp_path)
    finally:
        os.remove(tmp_path)
