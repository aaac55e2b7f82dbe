"""
Unit Tests for Header and Noise Detection

Tests for unit headers, OR separators and boilerplate filtering.
"""

import pytest

from examace.extractor.detection.headers import (
    is_noise_line,
    is_or_separator,
    parse_unit_header,
)


class TestParseUnitHeader:
    """Tests for parse_unit_header()."""

    @pytest.mark.parametrize("line,label", [
        ("UNIT - IV", "Unit 4"),
        ("UNIT-I", "Unit 1"),
        ("Unit 3", "Unit 3"),
        ("MODULE 2", "Unit 2"),
        ("Section B", "Unit B"),
        ("PART: X", "Unit 10"),
    ])
    def test_parse_when_header_then_canonical_label(self, line, label):
        assert parse_unit_header(line) == label

    @pytest.mark.parametrize("line", [
        "Unitary matrices and their properties",
        "Explain the unit of work pattern",
        "1. Define a module",
    ])
    def test_parse_when_not_header_then_none(self, line):
        assert parse_unit_header(line) is None


class TestIsOrSeparator:
    """Tests for is_or_separator()."""

    @pytest.mark.parametrize("line,expected", [
        ("OR", True),
        ("or", True),
        ("(OR)", True),
        ("Order of growth", False),
        ("OR gate truth table", False),
    ])
    def test_or_when_checked_then_expected(self, line, expected):
        assert is_or_separator(line) is expected


class TestIsNoiseLine:
    """Tests for is_noise_line()."""

    @pytest.mark.parametrize("line", [
        "Time: 3 Hours",
        "Max. Marks: 70",
        "Answer any FIVE questions",
        "B.Tech III Semester Regular Examinations",
        "XYZ College of Engineering",
        "Anna University, Chennai",
        "Assume missing data suitably",
        "------------",
        "Reg. No: ________",
        "Note: All questions carry equal marks",
    ])
    def test_noise_when_boilerplate_then_true(self, line):
        assert is_noise_line(line) is True

    @pytest.mark.parametrize("line", [
        "Time complexity of merge sort",
        "1. Explain the OSI model",
        "Notes on virtual memory are given below",
        "Describe a database schema for a university library",
        "Section wise distribution of page tables",
    ])
    def test_noise_when_question_content_then_false(self, line):
        assert is_noise_line(line) is False
