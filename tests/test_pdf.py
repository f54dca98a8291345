"""Tests for PDF loading."""

import pytest
from pypdf import PdfWriter

from ragmypdf import PDFLoadError, load_pdf_content


def write_blank_pdf(path, pages: int = 2, user_password: str | None = None):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=200, height=200)
    if user_password is not None:
        writer.encrypt(user_password=user_password, owner_password="owner-secret")
    with open(path, "wb") as f:
        writer.write(f)
    return path


class TestLoadPdfContent:
    """Tests for load_pdf_content."""

    def test_blank_pdf(self, tmp_path):
        """Test that a PDF without text gives an empty document."""
        path = write_blank_pdf(tmp_path / "blank.pdf", pages=3)

        document = load_pdf_content(path)

        assert document.id == "blank"
        assert document.source == str(path)
        assert document.metadata["pages"] == 3
        assert document.content.split() == []

    def test_missing_file(self, tmp_path):
        """Test a path that does not exist."""
        with pytest.raises(PDFLoadError) as exc_info:
            load_pdf_content(tmp_path / "nope.pdf")

        assert "nope.pdf" in exc_info.value.message

    def test_not_a_pdf(self, tmp_path):
        """Test a file that is not a PDF."""
        path = tmp_path / "notes.pdf"
        path.write_text("just some text, not a pdf")

        with pytest.raises(PDFLoadError):
            load_pdf_content(path)

    def test_password_protected(self, tmp_path):
        """Test a PDF that needs a real password."""
        path = write_blank_pdf(tmp_path / "locked.pdf", pages=1, user_password="s3cret")

        with pytest.raises(PDFLoadError):
            load_pdf_content(path)
