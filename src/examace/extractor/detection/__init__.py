"""
Module: extractor.detection

Purpose:
    Detection subpackage for classifying single lines of document text.
    Contains modules for detecting question numbering, mark allocations,
    unit headers, OR separators and boilerplate noise.

Key Modules:
    - numerals: Question starts and embedded sub-questions
    - marks: Trailing mark allocations ((10), [5 marks])
    - headers: Unit headers, OR separators, noise lines

Used By:
    - extractor.structuring.segmenter: Line classification
    - extractor.utils.text: Noise filtering
"""
