import html
import io
import logging
import re
from pathlib import Path

from pdfminer.high_level import extract_text as pdf_extract
from docx import Document

from recruitops.utils.logging_config import get_logger

logging.getLogger("pdfminer").setLevel(logging.ERROR)
logger = get_logger(__name__)

_CID = re.compile(r"\(cid:\d+\)")
_TAGS = re.compile(r"<[^>]+>")
_CONTROL = re.compile(r"[\x00-\x08\x0b\x0e-\x1f\x7f\ufeff\u200b]")
_INLINE_WS = re.compile(r"[ \t\u00a0]+")
_BLANK_RUN = re.compile(r"\n{3,}")


def read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


def read_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join([p.text for p in doc.paragraphs])


def read_pdf(data: bytes) -> str:
    try:
        return pdf_extract(io.BytesIO(data))
    except Exception as e:
        logger.warning(f"pdfminer could not read document, trying unstructured: {e}")
    # heavy import, only paid for on the fallback path
    from unstructured.partition.auto import partition
    elems = partition(file=io.BytesIO(data), content_type="application/pdf")
    return "\n".join([e.text for e in elems if hasattr(e, "text") and e.text])


def normalize_text(x: str) -> str:
    """Strip document artifacts while keeping one line per visual line."""
    if not x:
        return ""
    x = x.replace("\r\n", "\n").replace("\r", "\n")
    x = x.replace("\x0c", "\n")  # pdfminer page breaks
    x = _CID.sub(" ", x)
    x = _CONTROL.sub("", x)
    lines = [_INLINE_WS.sub(" ", line).strip() for line in x.split("\n")]
    x = "\n".join(lines)
    return _BLANK_RUN.sub("\n\n", x).strip()


def normalize_snippet(x: str) -> str:
    """Plain-text view of a search-engine title or description."""
    if not x:
        return ""
    x = html.unescape(_TAGS.sub("", x))
    return _INLINE_WS.sub(" ", x.replace("\n", " ")).strip()


def extract_document_text(data: bytes, filename: str = "") -> str:
    """Normalised text of an uploaded résumé; never raises.

    Unreadable or unsupported documents come back as an empty string so the
    field extractor falls back to its defaults.
    """
    if not data:
        return ""
    ext = Path(filename or "").suffix.lower()
    try:
        if ext == ".docx":
            raw = read_docx(data)
        elif ext in (".txt", ".md"):
            raw = read_txt(data)
        else:
            raw = read_pdf(data)
    except Exception as e:
        logger.warning(f"Could not extract text from {filename or 'document'}: {e}")
        return ""
    return normalize_text(raw)
