"""
Module: extractor.utils

Purpose:
    Text and PDF helpers for the extraction pipeline.

Key Modules:
    - text: Line pre-processing and question text cleaning
    - pdf: PyMuPDF text extraction
"""
