"""
Purpose: Resume intake. Accept PDF/DOCX uploads, pull out the text, and
pre-fill whatever contact details can be found so the candidate only types
what is missing.
"""

from __future__ import annotations
import logging
import re
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader

logger = logging.getLogger(__name__)

MAX_RESUME_BYTES = 10 * 1024 * 1024
PDF_TYPES = {"application/pdf"}
DOCX_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}
ALLOWED_SUFFIXES = {".pdf", ".docx", ".doc"}

EMAIL = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.I)
PHONE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
_NAME_LINE = re.compile(r"^[A-Z][A-Za-z'.-]+(?:\s+[A-Z][A-Za-z'.-]+){1,3}$")


def validate_resume_upload(name: str, size: int, content_type: str | None) -> None:
    suffix = PurePath(name or "").suffix.lower()
    ctype = (content_type or "").lower()
    if suffix not in ALLOWED_SUFFIXES and not (
        "pdf" in ctype or "document" in ctype or ctype in DOCX_TYPES
    ):
        raise ValueError("Invalid file type. Please upload a PDF or DOCX file.")
    if size > MAX_RESUME_BYTES:
        raise ValueError("File too large. Please upload a file smaller than 10MB.")


def extract_pdf_text(file_like) -> str:
    reader = PdfReader(file_like)
    parts = []
    for page in reader.pages:
        txt = page.extract_text() or ""
        if txt.strip():
            parts.append(txt)
    return "\n\n".join(parts).strip()


def extract_docx_text(file_like) -> str:
    doc = Document(file_like)
    return "\n".join(p.text for p in doc.paragraphs if p.text.strip()).strip()


def extract_resume_text(file_like, name: str) -> str:
    """
    Best-effort text extraction. Unreadable files yield "" so the candidate can
    still continue by typing their details.
    """
    suffix = PurePath(name or "").suffix.lower()
    try:
        if suffix == ".pdf":
            return extract_pdf_text(file_like)
        if suffix == ".docx":
            return extract_docx_text(file_like)
    except Exception as e:
        logger.warning("Could not read resume %s: %s", name, e)
        return ""
    logger.info("No text extractor for %s; skipping", name)
    return ""


def extract_contact_fields(text: str) -> dict[str, str]:
    """Find name/email/phone in resume text. Missing values come back empty."""
    text = text or ""
    email = EMAIL.search(text)
    phone = PHONE.search(text)

    name = ""
    for line in text.splitlines()[:8]:
        line = line.strip()
        if line and _NAME_LINE.match(line) and not EMAIL.search(line):
            name = line
            break

    return {
        "name": name,
        "email": email.group(0) if email else "",
        "phone": " ".join(phone.group(0).split()) if phone else "",
    }
