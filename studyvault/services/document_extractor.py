"""Document text extraction service for syllabus uploads."""

import io
import logging
from dataclasses import dataclass
from enum import Enum

from studyvault.core.errors import ExtractionFailed, UnsupportedFormat

logger = logging.getLogger(__name__)


class DocumentFormat(str, Enum):
    TXT = "txt"
    PDF = "pdf"
    DOCX = "docx"
    DOC = "doc"


@dataclass(frozen=True)
class ExtractedText:
    """Plain text pulled out of one uploaded document."""
    content: str
    source_format: DocumentFormat


class PlainTextStrategy:
    """Read the upload as UTF-8 text."""

    def extract(self, file_content: bytes) -> str:
        return file_content.decode("utf-8")


class PdfTextStrategy:
    """Concatenate the text of every PDF page in page order."""

    def extract(self, file_content: bytes) -> str:
        from PyPDF2 import PdfReader

        reader = PdfReader(io.BytesIO(file_content))

        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)

        return "\n".join(text_parts)


class WordTextStrategy:
    """Raw text of a Word document: paragraphs first, then table rows."""

    def extract(self, file_content: bytes) -> str:
        from docx import Document

        doc = Document(io.BytesIO(file_content))

        text_parts = [paragraph.text for paragraph in doc.paragraphs]

        # Schedules are often laid out as tables; keep each row on one line
        # so a date cell and its assignment cell stay together.
        for table in doc.tables:
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    text_parts.append(" ".join(row_text))

        return "\n".join(text_parts)


STRATEGIES = {
    DocumentFormat.TXT: PlainTextStrategy(),
    DocumentFormat.PDF: PdfTextStrategy(),
    DocumentFormat.DOCX: WordTextStrategy(),
    DocumentFormat.DOC: WordTextStrategy(),
}


def get_supported_extensions_display() -> str:
    """Get a human-readable list of supported extensions."""
    return ", ".join(f".{fmt.value}" for fmt in DocumentFormat)


def detect_format(filename: str) -> DocumentFormat:
    """Map a filename's extension (case-insensitive) to a DocumentFormat."""
    _, dot, ext = (filename or "").rpartition(".")
    try:
        if not dot:
            raise ValueError(ext)
        return DocumentFormat(ext.lower())
    except ValueError:
        raise UnsupportedFormat(
            f"Unsupported file type: {filename}. Supported formats: {get_supported_extensions_display()}"
        )


def extract_text(file_content: bytes, filename: str) -> ExtractedText:
    """
    Extract text from a document file.

    Args:
        file_content: The raw bytes of the file
        filename: Original filename; only its extension is used

    Returns:
        ExtractedText with the document's text and detected format

    Raises:
        UnsupportedFormat: the extension is not txt, pdf, docx or doc
        ExtractionFailed: the format-specific extractor raised
    """
    source_format = detect_format(filename)
    strategy = STRATEGIES[source_format]

    try:
        text = strategy.extract(file_content)
    except Exception as e:
        logger.error(f"Failed to extract text from {filename}: {e}")
        raise ExtractionFailed(f"Failed to extract text from {filename}: {e}") from e

    logger.info(f"Extracted {len(text)} characters from {filename}")
    return ExtractedText(content=text, source_format=source_format)
