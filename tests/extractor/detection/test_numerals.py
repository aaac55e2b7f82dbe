"""
Unit Tests for Question Numeral Detection

Tests for parse_question_start(), find_embedded_subquestion() and
looks_like_question().
"""

import pytest

from examace.extractor.detection.numerals import (
    find_embedded_subquestion,
    looks_like_question,
    parse_question_start,
)


class TestParseQuestionStart:
    """Tests for parse_question_start()."""

    @pytest.mark.parametrize("line,label,content", [
        ("1. What is TCP?", "1", "What is TCP?"),
        ("12) Explain paging", "12", "Explain paging"),
        ("Q.3 Define deadlock", "3", "Define deadlock"),
        ("Q3. Define deadlock", "3", "Define deadlock"),
        ("5 a Define CPU", "5a", "Define CPU"),
        ("5 b) Explain ALU", "5b", "Explain ALU"),
        ("5a) Explain ALU", "5a", "Explain ALU"),
        ("1(a) Describe RAID", "1a", "Describe RAID"),
        ("1 (b) Describe RAID", "1b", "Describe RAID"),
        ("2. a) List the OSI layers", "2a", "List the OSI layers"),
        ("2 Explain the OSI model", "2", "Explain the OSI model"),
    ])
    def test_parse_when_numbered_line_then_extracts_label_and_content(self, line, label, content):
        numeral = parse_question_start(line)

        assert numeral is not None
        assert numeral.label == label
        assert numeral.content == content

    def test_parse_when_uppercase_letter_then_lowercased(self):
        assert parse_question_start("4 B) Explain caching").letter == "b"

    @pytest.mark.parametrize("line", [
        "Explain the OSI model",
        "2023 Regular Examination",
        "10 Marks",
        "1.5 times faster",
        "",
    ])
    def test_parse_when_not_a_question_start_then_none(self, line):
        assert parse_question_start(line) is None


class TestFindEmbeddedSubquestion:
    """Tests for find_embedded_subquestion()."""

    def test_embedded_when_sentence_form_then_splits(self):
        """"... text. 7 b Define ..." starts sub-question 7b."""
        found = find_embedded_subquestion("scheduling policy. 7 b Define paging with an example")

        assert found.prefix == "scheduling policy"
        assert (found.number, found.letter) == ("7", "b")
        assert found.content == "Define paging with an example"
        assert found.marks is None

    def test_embedded_when_marks_form_then_captures_marks(self):
        """"... (6 Marks) b Describe ..." carries the marks of the prefix."""
        found = find_embedded_subquestion("and its benefits (6 Marks) b Describe thrashing")

        assert found.prefix == "and its benefits"
        assert found.number == ""
        assert found.letter == "b"
        assert found.marks == 6
        assert found.content == "Describe thrashing"

    def test_embedded_when_plain_line_then_none(self):
        assert find_embedded_subquestion("with a neat diagram of the memory hierarchy") is None


class TestLooksLikeQuestion:
    """Tests for looks_like_question()."""

    @pytest.mark.parametrize("line,expected", [
        ("Explain the concept of virtual memory", True),
        ("How does a semaphore work", True),
        ("Calculate the average waiting time", True),
        ("Department of Computer Science", False),
        ("Showcase of projects", False),
    ])
    def test_looks_like_question_when_keyword_then_true(self, line, expected):
        assert looks_like_question(line) is expected
