"""
Module: extractor.utils.pdf

Purpose:
    PDF text extraction. Decodes the text layer of every page in reading
    order; image-only (scanned) PDFs yield little or no text and are
    rejected later by the pipeline's length check.

Key Functions:
    - extract_document_text(): Full text of a PDF file
    - extract_page_texts(): Per-page text list

Dependencies:
    - fitz (PyMuPDF): PDF parsing and text extraction

Used By:
    - examace.cli: ingest command
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import fitz

from examace.core.errors import DocumentReadError

logger = logging.getLogger(__name__)


def extract_page_texts(pdf_path: Path) -> List[str]:
    """
    Extract text from each page of a PDF.

    Args:
        pdf_path: Path to the PDF file.

    Returns:
        One string per page, in page order.

    Raises:
        DocumentReadError: If the file cannot be opened as a PDF.
    """
    try:
        doc = fitz.open(pdf_path)
    except (fitz.FileDataError, FileNotFoundError, RuntimeError) as exc:
        raise DocumentReadError(f"Cannot open PDF {pdf_path}: {exc}", path=str(pdf_path)) from exc

    try:
        if doc.needs_pass:
            raise DocumentReadError(f"PDF is password protected: {pdf_path}", path=str(pdf_path))
        return [page.get_text("text", sort=True) for page in doc]
    finally:
        doc.close()


def extract_document_text(pdf_path: Path) -> str:
    """
    Extract the full text of a PDF, pages separated by newlines.

    Example:
        >>> text = extract_document_text(Path("os_2023.pdf"))
        >>> text.splitlines()[0]
        'UNIT - I'
    """
    pages = extract_page_texts(Path(pdf_path))
    text = "\n".join(pages)
    logger.info(f"Extracted {len(text)} characters from {len(pages)} page(s) of {Path(pdf_path).name}")
    return text
