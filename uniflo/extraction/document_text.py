# pdfplumber extract, OCR fallbacks, markdown passthrough

# uniflo/extraction/document_text.py
from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff", ".webp"}


class DocumentTextError(RuntimeError):
    pass


def detect_file_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """
    "pdf", "image" or "markdown".

    Anything that is neither a PDF nor an image is read as markdown/plain text.
    """
    ct = (content_type or "").lower()
    suffix = Path(filename or "").suffix.lower()
    if "pdf" in ct or suffix == ".pdf":
        return "pdf"
    if ct.startswith("image") or suffix in IMAGE_SUFFIXES:
        return "image"
    return "markdown"


def _clean_page(raw: Optional[str]) -> str:
    return re.sub(r"[ \t]+", " ", raw or "").strip()


def extract_pdf_text_by_page(pdf_path: str) -> List[str]:
    """
    One string per page. Scanned pages come back as "" (no text layer).
    """
    import pdfplumber

    with pdfplumber.open(pdf_path) as pdf:
        return [_clean_page(page.extract_text()) for page in pdf.pages]


def looks_like_image_only(pages_text: List[str], min_chars_per_page: int = 40, ratio: float = 0.8) -> bool:
    """True when at least `ratio` of the pages are (nearly) empty, i.e. a scan."""
    if not pages_text:
        return True
    sparse = [t for t in pages_text if len(t) < min_chars_per_page]
    return len(sparse) / len(pages_text) >= ratio


def ocr_to_searchable_pdf(input_pdf: str, output_pdf: str) -> None:
    """Add a text layer to a scanned syllabus with the ocrmypdf CLI."""
    _run_tool(
        ["ocrmypdf", "--skip-text", input_pdf, output_pdf],
        missing="Scanned PDF syllabi need 'ocrmypdf' installed and available on PATH.",
    )


def ocr_image_text(image_path: str, lang: str = "eng") -> str:
    """Recognized text of a photographed or screenshotted syllabus (tesseract CLI)."""
    proc = _run_tool(
        ["tesseract", image_path, "stdout", "-l", lang],
        missing="Image syllabi need 'tesseract' installed and available on PATH.",
    )
    return proc.stdout.strip()


def _run_tool(cmd: List[str], missing: str) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise DocumentTextError(missing) from e
    except subprocess.CalledProcessError as e:
        raise DocumentTextError(f"{cmd[0]} failed: {(e.stderr or '')[:500]}") from e


def ensure_searchable_text(
    pdf_path: str,
    output_dir: str,
    prefer_ocr: bool = True,
) -> Tuple[List[str], bool, Optional[str]]:
    """
    (pages, used_ocr, warning) for a PDF syllabus.

    Scans are OCR'd into output_dir when prefer_ocr is set. If OCR is not
    possible the plain pdfplumber pages are returned with a warning.
    """
    pages = extract_pdf_text_by_page(pdf_path)
    if not (prefer_ocr and looks_like_image_only(pages)):
        return pages, False, None

    searchable = Path(output_dir) / f"ocr_{Path(pdf_path).stem}.pdf"
    try:
        ocr_to_searchable_pdf(pdf_path, str(searchable))
    except DocumentTextError as e:
        return pages, False, f"{Path(pdf_path).name} looks scanned but OCR failed: {e}"
    return extract_pdf_text_by_page(str(searchable)), True, None


def extract_document_text(
    path: str,
    file_type: str,
    work_dir: Optional[str] = None,
    prefer_ocr: bool = True,
) -> Tuple[str, List[str]]:
    """
    Plain text of an uploaded syllabus plus any extraction warnings.

    Raises DocumentTextError when nothing can be read.
    """
    warnings: List[str] = []

    if file_type == "pdf":
        try:
            pages, _, warning = ensure_searchable_text(
                pdf_path=path,
                output_dir=work_dir or str(Path(path).parent),
                prefer_ocr=prefer_ocr,
            )
        except DocumentTextError:
            raise
        except Exception as e:
            raise DocumentTextError(f"Could not read PDF {path}: {e}") from e
        if warning:
            warnings.append(warning)
        return "\n\n".join(pages), warnings

    if file_type == "image":
        return ocr_image_text(path), warnings

    if file_type in ("markdown", "md"):
        try:
            return Path(path).read_text(encoding="utf-8"), warnings
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentTextError(f"Could not read text file {path}: {e}") from e

    raise DocumentTextError(f"Unsupported file type: {file_type}")
