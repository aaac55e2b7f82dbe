"""
Unit Tests for Syllabus Tables

Tests for unit label canonicalization and JSON syllabus loading.
"""

import json

import pytest

from examace.common.syllabus import (
    DEFAULT_SYLLABUS,
    GENERAL_UNIT,
    Syllabus,
    canonical_unit_label,
    load_syllabus,
    roman_to_int,
)


class TestRomanToInt:
    """Tests for roman_to_int()."""

    @pytest.mark.parametrize("value,expected", [
        ("I", 1), ("iv", 4), ("V", 5), ("IX", 9), ("XII", 12),
    ])
    def test_roman_when_valid_then_converted(self, value, expected):
        assert roman_to_int(value) == expected

    @pytest.mark.parametrize("value", ["A", "C", "", "4"])
    def test_roman_when_not_roman_then_none(self, value):
        assert roman_to_int(value) is None


class TestCanonicalUnitLabel:
    """Tests for canonical_unit_label()."""

    @pytest.mark.parametrize("value,expected", [
        ("UNIT-IV", "Unit 4"),
        ("unit 2", "Unit 2"),
        ("Unit: 03", "Unit 3"),
        ("unit b", "Unit B"),
        ("Unit C", "Unit C"),
        (None, GENERAL_UNIT),
        ("", GENERAL_UNIT),
        ("  Lab Work ", "Lab Work"),
    ])
    def test_canonical_when_label_then_normalized(self, value, expected):
        assert canonical_unit_label(value) == expected


class TestDefaultSyllabus:
    """Tests for the built-in five-unit table."""

    def test_default_when_loaded_then_five_ordered_units(self):
        assert list(DEFAULT_SYLLABUS) == ["Unit 1", "Unit 2", "Unit 3", "Unit 4", "Unit 5"]
        assert DEFAULT_SYLLABUS["Unit 3"].name == "Advanced Analysis"
        assert load_syllabus() is DEFAULT_SYLLABUS

    def test_round_trip_when_serialized_then_equal_tables(self):
        restored = Syllabus.from_dict(DEFAULT_SYLLABUS.to_dict())
        assert restored.to_dict() == DEFAULT_SYLLABUS.to_dict()


class TestLoadSyllabus:
    """Tests for load_syllabus() from JSON files."""

    def test_load_when_valid_file_then_keys_canonicalized(self, tmp_path):
        path = tmp_path / "networks.json"
        path.write_text(json.dumps({
            "units": {
                "UNIT I": {"name": "Physical Layer", "keywords": ["signal", "encoding"]},
                "Unit-II": {"name": "Data Link", "keywords": ["frame", "crc", ""]},
            }
        }), encoding="utf-8")

        syllabus = load_syllabus(path)

        assert list(syllabus) == ["Unit 1", "Unit 2"]
        assert syllabus["Unit 2"].keywords == ("frame", "crc")

    def test_load_when_missing_file_then_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_syllabus(tmp_path / "nope.json")

    @pytest.mark.parametrize("payload", [
        "not json",
        json.dumps([1, 2]),
        json.dumps({"units": {}}),
        json.dumps({"units": {"Unit 1": {"keywords": ["x"]}}}),
    ])
    def test_load_when_invalid_then_value_error(self, tmp_path, payload):
        path = tmp_path / "bad.json"
        path.write_text(payload, encoding="utf-8")

        with pytest.raises(ValueError):
            load_syllabus(path)
