import io
from unittest.mock import patch

from docx import Document

from recruitops.helpers.parsing import extract_document_text, normalize_snippet, normalize_text


class TestNormalization:

    def test_lines_survive_artifacts_do_not(self):
        raw = "\ufeffJane   Doe\x0c(cid:12)Designer\r\n\n\n\nCairo\x07"
        assert normalize_text(raw) == "Jane Doe\nDesigner\n\nCairo"

    def test_first_line_is_the_name(self):
        assert normalize_text("\n\n   Mona Adel  \nEngineer").splitlines()[0] == "Mona Adel"

    def test_empty(self):
        assert normalize_text("") == ""
        assert normalize_snippet(None) == ""

    def test_snippet_markup(self):
        assert normalize_snippet("<strong>Jane</strong> &amp; co\nCairo") == "Jane & co Cairo"


class TestDocumentText:

    def test_txt(self):
        assert extract_document_text(b"Jane Doe\nDesigner", "cv.txt") == "Jane Doe\nDesigner"

    def test_docx(self):
        doc = Document()
        doc.add_paragraph("Jane Doe")
        doc.add_paragraph("Graphic Designer")
        buf = io.BytesIO()
        doc.save(buf)
        text = extract_document_text(buf.getvalue(), "cv.docx")
        assert text.splitlines()[:2] == ["Jane Doe", "Graphic Designer"]

    def test_unreadable_document_is_empty_text(self):
        with patch("recruitops.helpers.parsing.read_pdf", side_effect=RuntimeError("bad pdf")):
            assert extract_document_text(b"%PDF-1.4 junk", "cv.pdf") == ""
        assert extract_document_text(b"", "cv.pdf") == ""
