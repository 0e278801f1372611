from io import BytesIO

import pytest
from PyPDF2 import PdfWriter

from errors import ResumeParseError
from file_utils import extract_text_from_pdf, looks_like_pdf


def blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buf = BytesIO()
    writer.write(buf)
    return buf.getvalue()


def test_blank_pdf_gives_empty_text():
    assert extract_text_from_pdf(blank_pdf_bytes()) == ""


def test_garbage_raises_parse_error():
    with pytest.raises(ResumeParseError):
        extract_text_from_pdf(b"definitely not a pdf")


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("resume.pdf", "application/pdf", True),
        ("resume.PDF", "application/octet-stream", True),
        ("resume.docx", "application/pdf", True),
        ("resume", None, True),
        ("resume.txt", "text/plain", False),
        (None, "text/plain", False),
    ],
)
def test_looks_like_pdf(filename, content_type, expected):
    assert looks_like_pdf(filename, content_type) is expected


@pytest.mark.parametrize("error", [KeyError("/Root"), TypeError("bad object"), AttributeError("no pages")])
def test_unexpected_reader_errors_become_parse_errors(monkeypatch, error):
    def broken_reader(stream):
        raise error

    monkeypatch.setattr("file_utils.PdfReader", broken_reader)

    with pytest.raises(ResumeParseError):
        extract_text_from_pdf(b"%PDF-1.4 truncated")
