"""
Tests for the bounded field window.
"""

from decimal import Decimal

import pytest

from vendor_extraction.models.records import DiagnosticReason
from vendor_extraction.scanner.anchor import next_anchor
from vendor_extraction.scanner.field_window import extract_fields
from vendor_extraction.schema import VendorSchema

from tests.conftest import DOT_LOCALE, SCENARIO_A_LINES, make_stream


def scan(lines, schema, from_index=0):
    stream = make_stream(lines)
    diagnostics = []
    anchor = next_anchor(stream, from_index, schema)
    window = extract_fields(stream, anchor, schema, diagnostics)
    return window, diagnostics


def reasons(diagnostics):
    return [(d.reason, d.detail) for d in diagnostics]


class TestLabels:
    """Test label recognition inside the window."""

    def test_scenario_a_fields(self, style_schema):
        """Test inline labels, lookahead labels and amount overflow."""
        window, diagnostics = scan(SCENARIO_A_LINES, style_schema)
        record = window.raw_record

        assert record.item_code == "ABC123 JACKET"
        assert record.fields["fabric"] == "WOOL"
        assert record.fields["colour"] == "Blue"
        assert record.fields["quantity"] == 5
        assert record.fields["unit_price"] == Decimal("10.00")
        assert record.fields["total_price"] == Decimal("50.00")
        assert window.stop_index == len(SCENARIO_A_LINES)
        assert diagnostics == []

    def test_lookahead_refuses_another_label(self, style_schema):
        """Test that a label followed by a label records a recovery gap."""
        lines = ["Style: A1", "Colour:", "Fabric: WOOL", "Qty", "2", "Unit Price", "1.00"]
        window, diagnostics = scan(lines, style_schema)

        assert "colour" not in window.raw_record.fields
        assert window.raw_record.fields["fabric"] == "WOOL"
        assert reasons(diagnostics) == [(DiagnosticReason.FIELD_RECOVERY_GAP, "colour")]
        assert diagnostics[0].line_index == 1

    def test_lookahead_refuses_terminator(self, style_schema):
        """Test that a terminator is never taken as a value."""
        lines = ["Style: A1", "Qty", "Total", "5"]
        window, diagnostics = scan(lines, style_schema)

        assert window.stop_index == 2
        assert (DiagnosticReason.FIELD_RECOVERY_GAP, "quantity") in reasons(diagnostics)

    def test_earlier_label_wins(self):
        """Test that label vocabulary order decides competing labels."""
        schema = VendorSchema(
            name="prices",
            anchor_pattern=r"^Item (\S+)",
            label_vocabulary={"Net Price": "unit_price", "Price": "unit_price"},
            numeric_locale=DOT_LOCALE,
        )
        window, _ = scan(["Item A", "Price: 12.00", "Net Price: 10.00"], schema)
        assert window.raw_record.fields["unit_price"] == Decimal("10.00")

        window, _ = scan(["Item A", "Net Price: 10.00", "Price: 12.00"], schema)
        assert window.raw_record.fields["unit_price"] == Decimal("10.00")

    def test_inline_capture_beats_label(self):
        """Test that anchor-line values outrank labelled ones."""
        schema = VendorSchema(
            name="inline",
            anchor_pattern=r"^Item (\S+)",
            inline_patterns={"quantity": r"(\d+) pcs"},
            label_vocabulary={"Qty": "quantity"},
            numeric_locale=DOT_LOCALE,
        )
        window, _ = scan(["Item A 3 pcs", "Qty: 7"], schema)
        assert window.raw_record.fields["quantity"] == 3

    def test_numeric_parse_failure(self, style_schema):
        """Test that a bad number leaves the field absent with a diagnostic."""
        lines = ["Style: A1", "Qty: many", "Unit Price: -4.00"]
        window, diagnostics = scan(lines, style_schema)

        assert "quantity" not in window.raw_record.fields
        assert "unit_price" not in window.raw_record.fields
        assert (DiagnosticReason.NUMERIC_PARSE_FAILURE, "quantity") in reasons(diagnostics)
        assert (DiagnosticReason.NUMERIC_PARSE_FAILURE, "unit_price") in reasons(diagnostics)

    def test_missing_required_fields(self, style_schema):
        """Test that unset required fields are reported at the anchor line."""
        window, diagnostics = scan(["Style: A1", "Fabric: WOOL"], style_schema)

        gaps = [d for d in diagnostics if d.reason is DiagnosticReason.FIELD_RECOVERY_GAP]
        assert [d.detail for d in gaps] == ["quantity", "unit_price"]
        assert all(d.line_index == 0 for d in gaps)
        assert gaps[0].raw_text == "Style: A1"


class TestWindowBounds:
    """Test where the window stops."""

    def test_stops_before_next_anchor(self, style_schema):
        """Test that the next anchor is left for the next record."""
        lines = ["Style: A1", "Qty: 1", "Style: B2", "Qty: 2"]
        window, _ = scan(lines, style_schema)

        assert window.stop_index == 2
        assert window.raw_record.fields["quantity"] == 1

    def test_stops_at_size_code(self, size_schema):
        """Test that a size-code line ends the window."""
        window, _ = scan(["Item A", "Price: 2,50", "XS", "1"], size_schema)
        assert window.stop_index == 2

    def test_window_bound(self, size_schema):
        """Test that at most window_bound lines are scanned."""
        lines = ["Item A"] + [f"line {n}" for n in range(10)] + ["Price: 9,99"]
        window, _ = scan(lines, size_schema)

        assert window.stop_index == 1 + size_schema.window_bound
        assert "unit_price" not in window.raw_record.fields

    def test_stop_index_past_anchor(self, style_schema):
        """Test that an anchor on the last line still advances."""
        window, _ = scan(["noise", "Style: Z9"], style_schema)
        assert window.stop_index == 2


class TestTextLines:
    """Test skip lines, soft fields and descriptions."""

    def test_item_code_from_following_line(self, style_schema):
        """Test that a bare anchor takes its code from the next line."""
        window, _ = scan(["Style:", "WK20 PULL ON", "Qty: 1"], style_schema)
        assert window.raw_record.item_code == "WK20 PULL ON"

    def test_item_code_not_taken_from_label(self, style_schema):
        """Test that a label line is never used as the item code."""
        window, _ = scan(["Style:", "Qty: 1"], style_schema)
        assert window.raw_record.item_code == ""
        assert window.raw_record.fields["quantity"] == 1

    def test_description_until_first_label(self, style_schema):
        """Test that free text is description only before the first label."""
        lines = ["Style: A1", "PULL ON", "PATCH JEAN", "Qty: 1", "stray text"]
        window, _ = scan(lines, style_schema)
        assert window.raw_record.description_parts == ["PULL ON", "PATCH JEAN"]

    def test_skip_lines_are_ignored(self, style_schema):
        """Test that noise lines neither stop the window nor add text."""
        lines = ["Style: A1", "Page 2", "PULL ON", "Qty: 1"]
        window, _ = scan(lines, style_schema)
        assert window.raw_record.description_parts == ["PULL ON"]
        assert window.raw_record.fields["quantity"] == 1

    def test_soft_field(self, style_schema):
        """Test a field recognised by content alone."""
        window, _ = scan(["Style: A1", "Qty: 1", "100% COTTON"], style_schema)
        assert window.raw_record.soft_fields["material"] == "100% COTTON"
        assert window.raw_record.description_parts == []

    def test_labelled_value_beats_soft_value(self):
        """Test that a soft value never replaces a labelled one."""
        schema = VendorSchema(
            name="soft",
            anchor_pattern=r"^Item (\S+)",
            label_vocabulary={"Material": "material"},
            soft_fields={"material": r"\d+%\s*\w+"},
        )
        window, _ = scan(["Item A", "80% WOOL", "Material: LINEN"], schema)
        assert window.raw_record.resolved_fields()["material"] == "LINEN"


class TestValueLines:
    """Test which lines may serve as label values or item codes."""

    @pytest.fixture
    def sized_style_schema(self):
        return VendorSchema(
            name="sized-style",
            anchor_pattern=r"^Style:\s*(?P<item_code>.*)$",
            label_vocabulary={"Colour": "colour", "Price": "unit_price"},
            size_code_vocabulary={"XS", "S"},
            skip_patterns=[r"^Page \d+$"],
            numeric_locale=DOT_LOCALE,
        )

    def test_label_value_is_not_a_size_code(self, sized_style_schema):
        """Test that a size line after an empty label ends the window instead."""
        lines = ["Style: A1", "Price:", "XS", "1", "S", "2"]
        window, diagnostics = scan(lines, sized_style_schema)

        assert window.stop_index == 2
        assert "unit_price" not in window.raw_record.fields
        assert reasons(diagnostics) == [(DiagnosticReason.FIELD_RECOVERY_GAP, "unit_price")]
        assert diagnostics[0].line_index == 1

    def test_label_value_after_noise(self, sized_style_schema):
        """Test that noise between a label and its value is stepped over."""
        lines = ["Style: A1", "Colour:", "Page 2", "Blue"]
        window, diagnostics = scan(lines, sized_style_schema)

        assert window.raw_record.fields["colour"] == "Blue"
        assert window.stop_index == 4
        assert diagnostics == []

    def test_label_value_noise_then_size(self, sized_style_schema):
        """Test that noise followed by a size line leaves the label empty."""
        lines = ["Style: A1", "Colour:", "Page 2", "XS", "1"]
        window, diagnostics = scan(lines, sized_style_schema)

        assert "colour" not in window.raw_record.fields
        assert window.stop_index == 3
        assert reasons(diagnostics) == [(DiagnosticReason.FIELD_RECOVERY_GAP, "colour")]

    def test_item_code_is_not_a_size_code(self, sized_style_schema):
        """Test that a bare anchor does not take a size line as its code."""
        window, _ = scan(["Style:", "XS", "1"], sized_style_schema)

        assert window.raw_record.item_code == ""
        assert window.stop_index == 1

    def test_item_code_after_noise(self, sized_style_schema):
        """Test that the item code is looked up past noise lines."""
        window, _ = scan(["Style:", "Page 2", "WK20 PULL ON", "Colour: Red"],
                         sized_style_schema)

        assert window.raw_record.item_code == "WK20 PULL ON"
        assert window.raw_record.fields["colour"] == "Red"
        assert window.raw_record.description_parts == []

    def test_soft_numeric_failure_is_reported(self):
        """Test that an unparsable soft quantity is recorded, not dropped."""
        schema = VendorSchema(
            name="soft-qty",
            anchor_pattern=r"^Item (\S+)",
            soft_fields={"quantity": r"(\S+) pcs"},
            numeric_locale=DOT_LOCALE,
        )
        window, diagnostics = scan(["Item A", "many pcs", "4 pcs"], schema)

        assert reasons(diagnostics) == [(DiagnosticReason.NUMERIC_PARSE_FAILURE, "quantity")]
        assert diagnostics[0].line_index == 1
        assert diagnostics[0].raw_text == "many pcs"
        assert window.raw_record.resolved_fields()["quantity"] == 4
