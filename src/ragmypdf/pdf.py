"""PDF text extraction using pypdf."""

import logging
from pathlib import Path

from pypdf import PasswordType, PdfReader
from pypdf.errors import PdfReadError

from ragmypdf.exceptions import PDFLoadError
from ragmypdf.rag.document import Document

logger = logging.getLogger(__name__)


def load_pdf_content(file_path: str | Path) -> Document:
    """Extract the text of every page of a PDF into one document.

    Args:
        file_path: Location of the PDF

    Returns:
        Document whose content is the page texts joined by newlines

    Raises:
        PDFLoadError: If the file is missing, unreadable or encrypted
    """
    pdf_path = Path(file_path)

    if not pdf_path.is_file():
        raise PDFLoadError(str(pdf_path), "file not found")

    try:
        reader = PdfReader(str(pdf_path))
    except (PdfReadError, OSError, ValueError) as exc:
        raise PDFLoadError(str(pdf_path), str(exc)) from exc

    if reader.is_encrypted:
        # Many PDFs are encrypted with an empty user password
        try:
            outcome = reader.decrypt("")
        except Exception as exc:
            raise PDFLoadError(str(pdf_path), f"cannot decrypt PDF: {exc}") from exc
        if outcome == PasswordType.NOT_DECRYPTED:
            raise PDFLoadError(str(pdf_path), "encrypted PDF needs a password")
        logger.info(f"PDF {pdf_path.name} was encrypted; decrypted with empty password")

    try:
        pages = [page.extract_text() or "" for page in reader.pages]
    except PdfReadError as exc:
        raise PDFLoadError(str(pdf_path), str(exc)) from exc

    logger.debug(f"Extracted {len(pages)} pages from {pdf_path.name}")

    return Document(
        id=pdf_path.stem,
        content="\n".join(pages),
        metadata={"pages": len(pages), "filename": pdf_path.name},
        source=str(pdf_path),
    )
