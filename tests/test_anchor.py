"""
Tests for anchor scanning and line classification.
"""

from vendor_extraction.scanner.anchor import next_anchor
from vendor_extraction.scanner.classifier import (
    is_boundary,
    is_size_code,
    is_terminator,
    match_label
)
from vendor_extraction.schema import VendorSchema

from tests.conftest import ARMEDANGELS_LINES, SCENARIO_A_LINES, make_stream


class TestNextAnchor:
    """Test finding record starts."""

    def test_first_anchor_from_start(self, style_schema):
        """Test that the first matching line is returned."""
        anchor = next_anchor(make_stream(SCENARIO_A_LINES), 0, style_schema)
        assert anchor.index == 0
        assert anchor.item_code == ""

    def test_search_starts_at_cursor(self, style_schema):
        """Test that lines before from_index are not considered."""
        stream = make_stream(["Style: A1", "Qty", "Style: B2"])
        anchor = next_anchor(stream, 1, style_schema)
        assert anchor.index == 2
        assert anchor.item_code == "B2"

    def test_no_anchor_left(self, style_schema):
        """Test that None is returned past the last anchor."""
        stream = make_stream(["Style: A1", "Qty", "5"])
        assert next_anchor(stream, 1, style_schema) is None
        assert next_anchor(stream, 10, style_schema) is None

    def test_group_one_is_item_code(self, size_schema):
        """Test the unnamed group fallback for the item code."""
        anchor = next_anchor(make_stream(["Item  K-100 wool"]), 0, size_schema)
        assert anchor.item_code == "K-100"

    def test_named_groups_become_captures(self):
        """Test that extra named groups are inline captures."""
        schema = VendorSchema(
            name="named",
            anchor_pattern=r"^(?P<item_code>\d+)\s+(?P<colour>[a-z]+)(?:\s+(?P<fit>[a-z]+))?$"
        )
        anchor = next_anchor(make_stream(["100 red"]), 0, schema)
        assert anchor.item_code == "100"
        assert anchor.inline_captures == {"colour": "red"}

    def test_inline_patterns(self, armedangels_schema):
        """Test that inline patterns are searched on the anchor line."""
        anchor = next_anchor(make_stream(ARMEDANGELS_LINES), 0, armedangels_schema)
        assert anchor.index == 1
        assert anchor.item_code == "30005160"
        assert anchor.inline_captures == {
            "colour": "3231 black",
            "quantity": "6",
            "unit_price": "29,95",
            "total_price": "179,70",
        }


class TestClassifier:
    """Test the line predicates shared by the scanner stages."""

    def test_label_forms(self, style_schema):
        """Test bare, colon and inline-value label lines."""
        assert match_label("Qty", style_schema).value is None
        assert match_label("Colour:", style_schema).value is None
        bare = match_label("unit price: 12.00", style_schema)
        assert bare.field_name == "unit_price"
        assert bare.value == "12.00"

    def test_label_must_cover_the_line(self, style_schema):
        """Test that text merely starting with a label is not a label."""
        assert match_label("Fabrication notes", style_schema) is None
        assert match_label("Qty 5", style_schema) is None

    def test_longest_label_wins(self):
        """Test that a longer label is not shadowed by its suffix or prefix."""
        schema = VendorSchema(
            name="rrp",
            anchor_pattern=r"^Item (\S+)",
            label_vocabulary={"Price": "total_price", "Price Each": "unit_price"},
        )
        assert match_label("Price Each: 4.00", schema).field_name == "unit_price"
        assert match_label("Price: 8.00", schema).field_name == "total_price"

    def test_terminators_are_case_insensitive(self, style_schema):
        """Test terminator matching."""
        assert is_terminator("TOTAL", style_schema)
        assert not is_terminator("Total due", style_schema)

    def test_size_codes_match_whole_line(self, size_schema):
        """Test size-code recognition."""
        assert is_size_code("XS", size_schema)
        assert is_size_code("2Y-3Y", size_schema)
        assert not is_size_code("XS 1", size_schema)
        assert not is_size_code("xl", size_schema)

    def test_boundaries(self, style_schema):
        """Test lines that may never serve as a label value."""
        assert is_boundary("Style: X", style_schema)
        assert is_boundary("Total", style_schema)
        assert is_boundary("Qty", style_schema)
        assert not is_boundary("Blue", style_schema)
