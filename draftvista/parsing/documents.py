import logging
import os
import re
from typing import Dict, Any, List

from docx import Document as DocxDocument
from PyPDF2 import PdfReader

from ..errors import ExtractionError, NoReadableText, UnsupportedFileType

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".doc")

# Control characters that are not whitespace; whitespace controls are folded below
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def clean_text(text: str) -> str:
    """Normalize extracted manuscript text.

    Line endings are unified and blank-line runs shortened first, then every
    whitespace run (line breaks included) becomes one space, so the result is a
    single line free of control characters. Applying it twice changes nothing.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    text = _CONTROL_CHARS.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def _extension(file_path: str) -> str:
    return os.path.splitext(str(file_path))[1].lower()


def extract_text(file_path: str) -> str:
    """Extract clean text from a manuscript, dispatching on the file extension.

    Raises:
        ExtractionError: wraps every failure as "Failed to extract text from file: ...".
            The original exception (``UnsupportedFileType``, ``NoReadableText``, ...)
            is kept as ``__cause__``.
    """
    ext = _extension(file_path)
    try:
        if ext == ".pdf":
            return extract_from_pdf(file_path)
        elif ext in (".docx", ".doc"):
            return extract_from_word(file_path)
        raise UnsupportedFileType(f"Unsupported file type: {ext or '(none)'}", ext)
    except ExtractionError as e:
        logger.error("Text extraction error for %s: %s", os.path.basename(str(file_path)), e)
        message = f"Failed to extract text from file: {e}"
        if isinstance(e, UnsupportedFileType):
            raise UnsupportedFileType(message, e.extension) from e
        raise type(e)(message) from e


def extract_from_pdf(file_path: str) -> str:
    try:
        reader = PdfReader(file_path)
        texts: List[str] = []
        for page in reader.pages:
            texts.append(page.extract_text() or "")
        text = "\n".join(texts)
        if not text.strip():
            raise NoReadableText("No readable text found in PDF. The file might be scanned or corrupted.")
        return clean_text(text)
    except Exception as e:
        raise _stage_error(e, "PDF extraction failed") from e


def extract_from_word(file_path: str) -> str:
    try:
        doc = DocxDocument(file_path)
        texts = [para.text for para in doc.paragraphs]
        for table in doc.tables:
            for row in table.rows:
                texts.append("\t".join(cell.text for cell in row.cells))
        text = "\n".join(texts)
        if not text.strip():
            raise NoReadableText("No readable text found in Word document.")
        skipped = len(doc.inline_shapes)
        if skipped:
            logger.warning("Word extraction warnings: %d embedded images skipped in %s",
                           skipped, os.path.basename(str(file_path)))
        return clean_text(text)
    except Exception as e:
        raise _stage_error(e, "Word document extraction failed") from e


def _stage_error(error: Exception, prefix: str) -> ExtractionError:
    """Prefix a backend failure with the stage name, keeping ``NoReadableText`` recognisable."""
    cls = NoReadableText if isinstance(error, NoReadableText) else ExtractionError
    return cls(f"{prefix}: {error}")


def validate_file(file_path: str) -> Dict[str, Any]:
    """Describe a file on disk for logging: existence, size and whether its type is supported."""
    try:
        size = os.path.getsize(file_path)
    except OSError as e:
        return {"exists": False, "error": str(e)}
    ext = _extension(file_path)
    return {
        "exists": True,
        "size": size,
        "extension": ext,
        "is_supported": ext in SUPPORTED_EXTENSIONS,
        "size_in_mb": f"{size / (1024 * 1024):.2f}",
    }
