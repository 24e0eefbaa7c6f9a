import pytest
from docx import Document as DocxDocument
from PyPDF2 import PdfWriter

from draftvista.errors import ExtractionError, NoReadableText, UnsupportedFileType
from draftvista.parsing import documents
from draftvista.parsing.documents import clean_text, extract_text, validate_file


CLEANER_SAMPLES = [
    "",
    "   ",
    "plain text",
    "a\r\nb\rc\nd",
    "para one\n\n\n\n\npara two",
    "tab\tseparated\x0bvertical\x0cfeed",
    "ctrl\x00\x01chars\x7f here",
    "a \x00 b",
    "  leading and trailing  \n",
    "unicode space line\x85next",
    "\x1c\x1d\x1e\x1f separators",
]


@pytest.mark.parametrize("raw", CLEANER_SAMPLES)
def test_clean_text_is_idempotent(raw):
    once = clean_text(raw)
    assert clean_text(once) == once


@pytest.mark.parametrize("raw", CLEANER_SAMPLES)
def test_clean_text_leaves_no_control_chars_or_newline_runs(raw):
    cleaned = clean_text(raw)
    assert "\n\n\n" not in cleaned
    assert not any(ord(c) < 0x20 or ord(c) == 0x7F for c in cleaned)
    assert cleaned == cleaned.strip()


def test_clean_text_collapses_whitespace():
    assert clean_text("Title\r\n\r\n\r\nAbstract   text\tgoes here ") == "Title Abstract text goes here"
    assert clean_text("a \x00 b") == "a b"


@pytest.mark.parametrize("name", ["paper.txt", "paper.odt", "paper", "paper.PDFX", "notes.md"])
def test_extract_text_rejects_unsupported_extensions(tmp_path, name):
    path = tmp_path / name
    path.write_text("hello")
    with pytest.raises(UnsupportedFileType) as exc:
        extract_text(str(path))
    assert str(exc.value).startswith("Failed to extract text from file: Unsupported file type")


def test_extract_text_dispatches_case_insensitively(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(documents, "extract_from_pdf", lambda p: calls.append(("pdf", p)) or "pdf text")
    monkeypatch.setattr(documents, "extract_from_word", lambda p: calls.append(("word", p)) or "word text")

    assert extract_text("/tmp/A.PDF") == "pdf text"
    assert extract_text("/tmp/b.DocX") == "word text"
    assert extract_text("/tmp/c.doc") == "word text"
    assert [kind for kind, _ in calls] == ["pdf", "word", "word"]


def test_blank_pdf_has_no_readable_text(tmp_path):
    path = tmp_path / "scan.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    with open(path, "wb") as f:
        writer.write(f)

    with pytest.raises(NoReadableText) as exc:
        extract_text(str(path))
    message = str(exc.value)
    assert message.startswith("Failed to extract text from file: PDF extraction failed: ")
    assert "scanned or corrupted" in message


def test_corrupt_pdf_is_wrapped_twice(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"not a pdf at all")
    with pytest.raises(ExtractionError) as exc:
        extract_text(str(path))
    assert str(exc.value).startswith("Failed to extract text from file: PDF extraction failed: ")
    assert exc.value.__cause__ is not None


def test_pdf_text_is_cleaned(tmp_path, monkeypatch):
    class FakePage:
        def __init__(self, text):
            self.text = text

        def extract_text(self):
            return self.text

    class FakeReader:
        def __init__(self, path):
            self.pages = [FakePage("Deep   Learning\r\n"), FakePage(None), FakePage("for\x00 Cells")]

    monkeypatch.setattr(documents, "PdfReader", FakeReader)
    assert extract_text(str(tmp_path / "x.pdf")) == "Deep Learning for Cells"


def test_docx_paragraphs_and_tables_are_extracted(tmp_path):
    path = tmp_path / "manuscript.docx"
    doc = DocxDocument()
    doc.add_heading("A Study of Things", level=1)
    doc.add_paragraph("We measured   things carefully.")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "n"
    table.rows[0].cells[1].text = "42"
    doc.save(str(path))

    text = extract_text(str(path))
    assert text == "A Study of Things We measured things carefully. n 42"


def test_empty_docx_has_no_readable_text(tmp_path):
    path = tmp_path / "empty.docx"
    DocxDocument().save(str(path))
    with pytest.raises(NoReadableText) as exc:
        extract_text(str(path))
    assert str(exc.value) == (
        "Failed to extract text from file: Word document extraction failed: "
        "No readable text found in Word document."
    )


def test_legacy_doc_binary_fails_with_word_prefix(tmp_path):
    path = tmp_path / "old.doc"
    path.write_bytes(b"\xd0\xcf\x11\xe0 legacy binary")
    with pytest.raises(ExtractionError) as exc:
        extract_text(str(path))
    assert "Word document extraction failed" in str(exc.value)


def test_validate_file(tmp_path):
    path = tmp_path / "m.docx"
    path.write_bytes(b"x" * 2048)
    info = validate_file(str(path))
    assert info["exists"] is True
    assert info["size"] == 2048
    assert info["extension"] == ".docx"
    assert info["is_supported"] is True

    missing = validate_file(str(tmp_path / "nope.pdf"))
    assert missing["exists"] is False
