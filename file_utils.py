# file_utils.py
import logging
from io import BytesIO

from PyPDF2 import PdfReader

from errors import ResumeParseError

logger = logging.getLogger(__name__)


def extract_text_from_pdf(file_bytes: bytes) -> str:
    """
    Extract text from a PDF (bytes).
    The result may be empty for scanned or image-only documents.
    """
    try:
        reader = PdfReader(BytesIO(file_bytes))
        texts = []
        for page in reader.pages:
            txt = page.extract_text() or ""
            texts.append(txt)
    except Exception as e:
        # malformed files surface as many different PyPDF2 exception types
        logger.error("Failed to read PDF: %s", e)
        raise ResumeParseError(str(e)) from e

    full_text = "\n".join(texts).strip()
    logger.info("Extracted %d characters from %d page(s)", len(full_text), len(texts))
    return full_text


def looks_like_pdf(filename: str | None, content_type: str | None) -> bool:
    if content_type and content_type != "application/pdf":
        return bool(filename) and filename.lower().endswith(".pdf")
    return True
