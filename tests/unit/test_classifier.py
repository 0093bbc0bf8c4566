"""Unit tests for the structural line classifier."""

import pytest

from fileflow.interfaces.blocks import BlockKind
from fileflow.strategies.reconstruction.classifier import (
    classify,
    classify_line,
    is_emphasized,
    is_heading,
    is_subheading,
)


class TestClassifyLine:
    """Test suite for classify_line."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("REVENUE GROWTH", BlockKind.HEADING),
            ("Summary:", BlockKind.HEADING),
            ("ID\tValue", BlockKind.TABLE_ROW),
            ("qty    price    total", BlockKind.TABLE_ROW),
            ("1. Increase budget", BlockKind.NUMBERED_ITEM),
            ("• coffee", BlockKind.BULLET_ITEM),
            ("- tea", BlockKind.BULLET_ITEM),
            ("* milk", BlockKind.BULLET_ITEM),
            ("**Important notice**", BlockKind.EMPHASIZED),
            ("the quick brown fox jumps", BlockKind.PARAGRAPH),
            ("ok", BlockKind.PARAGRAPH),
            ("", BlockKind.BLANK),
            ("   ", BlockKind.BLANK),
        ],
    )
    def test_examples(self, line, expected):
        """Test representative lines for every block kind."""
        assert classify_line(line) is expected

    def test_heading_levels(self):
        """Test that headings are level 1 and sub-headings level 2."""
        assert classify("REVENUE GROWTH") == (BlockKind.HEADING, 1)
        assert classify("Summary:") == (BlockKind.HEADING, 2)
        assert classify("1. Increase budget") == (BlockKind.NUMBERED_ITEM, 0)

    def test_is_deterministic(self):
        """Test that the same line always gets the same kind."""
        lines = ["REVENUE GROWTH", "Name\tAge", "- item", "plain words here"]
        first = [classify(line) for line in lines]
        for _ in range(5):
            assert [classify(line) for line in lines] == first

    def test_surrounding_whitespace_ignored(self):
        """Test that indentation does not change the classification."""
        assert classify_line("   REVENUE GROWTH   ") is BlockKind.HEADING

    # =========================================================================
    # Precedence Tests
    # =========================================================================

    def test_upper_case_table_line_is_heading(self):
        """Test that the heading rule wins over the table rule."""
        assert classify_line("NAME    AGE") is BlockKind.HEADING

    def test_capitalised_table_line_is_subheading(self):
        """Test that the sub-heading rule runs before the table rule."""
        assert classify_line("Name\tAge") is BlockKind.HEADING
        assert classify("Name\tAge")[1] == 2

    def test_numbered_line_with_gap_is_table_row(self):
        """Test that the table rule runs before the numbered-item rule."""
        assert classify_line("1.  Apples   3") is BlockKind.TABLE_ROW

    def test_long_capitalised_line_is_emphasized(self):
        """Test that a capitalised line too long for a sub-heading is emphasized."""
        line = "This sentence starts with a capital letter and keeps going for well over eighty characters."
        assert len(line) >= 80
        assert classify_line(line) is BlockKind.EMPHASIZED


class TestPredicates:
    """Boundary tests for the individual predicates."""

    def test_heading_length_bounds(self):
        """Test that headings need more than 3 and fewer than 100 characters."""
        assert not is_heading("ABC")
        assert is_heading("ABCD")
        assert is_heading("A" * 99)
        assert not is_heading("A" * 100)

    def test_heading_needs_cased_characters(self):
        """Test that digits and punctuation alone are not upper-case."""
        assert not is_heading("1234 5678")
        assert is_heading("Q3 2024 RESULTS")

    def test_subheading_bounds(self):
        """Test that sub-headings need more than 5 and fewer than 80 characters."""
        assert not is_subheading("Notes")
        assert is_subheading("Notes:")
        assert not is_subheading("Words " * 14 + ":")

    def test_emphasized_bounds(self):
        """Test that emphasized lines need more than 10 and fewer than 200 characters."""
        assert not is_emphasized("**short**")
        assert is_emphasized("**a bit longer**")
        assert not is_emphasized("A" + "a" * 199)
