"""
Tests for turning uploaded files into plain text.

OCR tools (ocrmypdf, tesseract) and pdfplumber are patched out, so these run
without any of them installed.
"""

import subprocess
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from uniflo.extraction import document_text
from uniflo.extraction.document_text import (
    DocumentTextError,
    detect_file_type,
    ensure_searchable_text,
    extract_document_text,
    looks_like_image_only,
    ocr_image_text,
)


class TestDetectFileType(unittest.TestCase):
    def test_content_type_and_suffix(self) -> None:
        self.assertEqual(detect_file_type("application/pdf", "a.bin"), "pdf")
        self.assertEqual(detect_file_type(None, "Syllabus.PDF"), "pdf")
        self.assertEqual(detect_file_type("image/png", None), "image")
        self.assertEqual(detect_file_type("application/octet-stream", "scan.jpeg"), "image")
        self.assertEqual(detect_file_type("text/markdown", "syllabus.md"), "markdown")
        self.assertEqual(detect_file_type(None, None), "markdown")


class TestLooksLikeImageOnly(unittest.TestCase):
    def test_heuristic(self) -> None:
        self.assertTrue(looks_like_image_only([]))
        self.assertTrue(looks_like_image_only(["", "  ", "x"]))
        self.assertFalse(looks_like_image_only(["A real page of syllabus text " * 3]))


class TestExtractDocumentText(unittest.TestCase):
    def test_markdown_is_read_as_is(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "syllabus.md"
            p.write_text("# CS 101\nHomework 1 due Week 2\n", encoding="utf-8")
            text, warnings = extract_document_text(str(p), "markdown")
        self.assertEqual(text, "# CS 101\nHomework 1 due Week 2\n")
        self.assertEqual(warnings, [])

    def test_missing_markdown_file(self) -> None:
        with self.assertRaises(DocumentTextError):
            extract_document_text("/nonexistent/syllabus.md", "markdown")

    def test_unsupported_type(self) -> None:
        with self.assertRaises(DocumentTextError):
            extract_document_text("syllabus.docx", "docx")

    def test_pdf_pages_are_joined(self) -> None:
        with patch.object(document_text, "extract_pdf_text_by_page", return_value=["Page one " * 10, "Page two " * 10]):
            text, warnings = extract_document_text("syllabus.pdf", "pdf", work_dir="/tmp")
        self.assertIn("Page one", text)
        self.assertIn("\n\nPage two", text)
        self.assertEqual(warnings, [])

    def test_unreadable_pdf_becomes_document_error(self) -> None:
        with patch.object(document_text, "extract_pdf_text_by_page", side_effect=ValueError("not a PDF")):
            with self.assertRaises(DocumentTextError):
                extract_document_text("syllabus.pdf", "pdf", work_dir="/tmp")

    def test_image_uses_tesseract(self) -> None:
        done = SimpleNamespace(stdout="Quiz 1 on 02/05/2024\n")
        with patch.object(document_text.subprocess, "run", return_value=done) as run:
            text, _ = extract_document_text("scan.png", "image")
        self.assertEqual(text, "Quiz 1 on 02/05/2024")
        self.assertEqual(run.call_args.args[0][:3], ["tesseract", "scan.png", "stdout"])


class TestOcrFallbacks(unittest.TestCase):
    def test_missing_tesseract(self) -> None:
        with patch.object(document_text.subprocess, "run", side_effect=FileNotFoundError()):
            with self.assertRaises(DocumentTextError):
                ocr_image_text("scan.png")

    def test_tesseract_failure(self) -> None:
        err = subprocess.CalledProcessError(1, ["tesseract"], stderr="bad image")
        with patch.object(document_text.subprocess, "run", side_effect=err):
            with self.assertRaises(DocumentTextError):
                ocr_image_text("scan.png")

    def test_scanned_pdf_without_ocr_tool_warns(self) -> None:
        with patch.object(document_text, "extract_pdf_text_by_page", return_value=["", ""]), patch.object(
            document_text, "ocr_to_searchable_pdf", side_effect=DocumentTextError("ocrmypdf missing")
        ):
            pages, used_ocr, warning = ensure_searchable_text("scan.pdf", "/tmp")
        self.assertEqual(pages, ["", ""])
        self.assertFalse(used_ocr)
        self.assertIn("OCR failed", warning)

    def test_scanned_pdf_is_ocrd(self) -> None:
        ocr_pages = ["Midterm Exam on March 4, 2024 in the main lecture hall"]
        with patch.object(document_text, "extract_pdf_text_by_page", side_effect=[[""], ocr_pages]), patch.object(
            document_text, "ocr_to_searchable_pdf"
        ) as ocr:
            pages, used_ocr, warning = ensure_searchable_text("scan.pdf", "/tmp")
        self.assertEqual(pages, ocr_pages)
        self.assertTrue(used_ocr)
        self.assertIsNone(warning)
        self.assertEqual(ocr.call_args.args, ("scan.pdf", str(Path("/tmp") / "ocr_scan.pdf")))

    def test_prefer_ocr_off_skips_ocr(self) -> None:
        with patch.object(document_text, "extract_pdf_text_by_page", return_value=[""]), patch.object(
            document_text, "ocr_to_searchable_pdf"
        ) as ocr:
            _, used_ocr, warning = ensure_searchable_text("scan.pdf", "/tmp", prefer_ocr=False)
        ocr.assert_not_called()
        self.assertFalse(used_ocr)
        self.assertIsNone(warning)


if __name__ == "__main__":
    unittest.main()
