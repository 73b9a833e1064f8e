"""
End-to-end tests for the extraction pipeline.
"""

import random
from decimal import Decimal

import pytest

from vendor_extraction import extract, extract_text
from vendor_extraction.models.line_stream import LineStream
from vendor_extraction.models.records import DiagnosticReason
from vendor_extraction.scanner.pipeline import ExtractionPipeline, PipelineState

from tests.conftest import ARMEDANGELS_LINES, SCENARIO_A_LINES, WYNCKEN_LINES


SOUP_VOCABULARY = [
    "Style:", "Style: K1", "Item A", "Item B", "XS", "S", "M", "2Y-3Y", "GOTS",
    "Qty", "Qty: 3", "5", "0", "-2", "Unit Price", "€ 1.00 € 3.00", "Price: 2,50",
    "Fabric: WOOL", "Colour:", "Total", "Total 4", "100% COTTON", "Page 3",
    "1.234,56", "abc", "", "   ",
]


def random_soup(rng, max_length=40):
    return [rng.choice(SOUP_VOCABULARY) for _ in range(rng.randint(0, max_length))]


class TestScenarios:
    """Test the reference scenarios."""

    def test_scenario_a_labelled_block(self, style_schema):
        """Test a labelled block with one-line lookahead values."""
        result = extract(SCENARIO_A_LINES, style_schema)

        assert result.record_count == 1
        record = result.records[0]
        assert "ABC123 JACKET" in record.item_code
        assert record.attributes == {"fabric": "WOOL", "colour": "Blue"}
        assert record.quantity == 5
        assert record.unit_price == Decimal("10.00")
        assert record.total_price == Decimal("50.00")
        assert record.size == "One Size"
        assert result.diagnostics == []

    def test_scenario_b_orphaned_size(self, size_schema):
        """Test that an orphaned size token is reported and the pair kept."""
        result = extract(["Item K-1", "XS", "S", "2"], size_schema)

        assert [(r.size, r.quantity) for r in result.records] == [("S", 2)]
        orphans = result.diagnostics_for(DiagnosticReason.ORPHANED_SIZE_TOKEN)
        assert len(orphans) == 1
        assert orphans[0].raw_text == "XS"

    def test_scenario_d_empty_stream(self, style_schema):
        """Test that empty input yields exactly one structural diagnostic."""
        result = extract([], style_schema)

        assert result.records == []
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].reason is DiagnosticReason.STRUCTURAL_INPUT_ERROR
        assert not result.success

    @pytest.mark.parametrize("lines", [None, ["", "  "], LineStream()])
    def test_null_and_blank_input(self, style_schema, lines):
        """Test that missing or blank input is reported, not raised."""
        result = extract(lines, style_schema)

        assert result.records == []
        assert [d.reason for d in result.diagnostics] == [DiagnosticReason.STRUCTURAL_INPUT_ERROR]

    def test_extract_text_none(self, style_schema):
        """Test that missing raw text is reported, not raised."""
        result = extract_text(None, style_schema)
        assert [d.reason for d in result.diagnostics] == [DiagnosticReason.STRUCTURAL_INPUT_ERROR]


class TestVendorDocuments:
    """Test the shipped vendor schemas on sample documents."""

    def test_wyncken_block(self, wyncken_schema):
        """Test a Wyncken style block."""
        result = extract(WYNCKEN_LINES, wyncken_schema)

        assert result.record_count == 1
        record = result.records[0]
        assert record.item_code == "WK20W170 PULL ON PATCH"
        assert record.description == "JEAN LIGHT WEIGHT"
        assert record.attributes == {
            "colour": "MID WASH DENIM",
            "country_of_origin": "IN D",
            "fabric": "COTTON",
            "material": "100% COTTON",
        }
        assert record.quantity == 5
        assert record.unit_price == Decimal("26.50")
        assert record.total_price == Decimal("132.50")

        gaps = result.diagnostics_for(DiagnosticReason.FIELD_RECOVERY_GAP)
        assert [(d.line_index, d.detail) for d in gaps] == [(5, "description")]

    def test_armedangels_invoice(self, armedangels_schema):
        """Test Armed Angels records with and without a size breakdown."""
        result = extract_text("\n".join(ARMEDANGELS_LINES), armedangels_schema)

        assert [(r.item_code, r.size, r.quantity) for r in result.records] == [
            ("30005160", "XS", 1),
            ("30005160", "S", 2),
            ("30005160", "M", 3),
            ("30005299", "One Size", 2),
        ]
        jacket = result.records[0]
        assert jacket.description == "TWEEDAA JACKET"
        assert jacket.attributes == {"certification": "GOTS", "colour": "3231 black"}
        assert jacket.unit_price == Decimal("29.95")
        assert result.records[2].total_price == Decimal("89.85")

        dress = result.records[3]
        assert dress.description == "MIRAAMA DRESS"
        assert dress.unit_price == Decimal("1049.00")
        assert dress.total_price == Decimal("2098.00")
        assert result.diagnostics == []

    def test_result_serialisation(self, armedangels_schema):
        """Test the dictionary view of a whole result."""
        data = extract(ARMEDANGELS_LINES, armedangels_schema).to_dict()

        assert data["vendor"] == "armedangels"
        assert data["record_count"] == 4
        assert data["total_quantity"] == 8
        assert data["records"][0]["unit_price"] == "29.95"
        assert data["diagnostic_counts"] == {}


class TestOwnershipAndOrder:
    """Test cursor movement across several records."""

    def test_first_anchor_owns_lines(self, style_schema):
        """Test that each line belongs to one record only."""
        lines = ["Style: A1", "Qty: 1", "Unit Price: 1.00",
                 "Style: B2", "Qty: 2", "Unit Price: 2.00"]
        result = extract(lines, style_schema)

        assert [(r.item_code, r.quantity) for r in result.records] == [("A1", 1), ("B2", 2)]

    def test_adjacent_anchors(self, style_schema):
        """Test that an anchor immediately after an anchor starts a new record."""
        result = extract(["Style: A1", "Style: B2", "Qty: 2", "Unit Price: 1.00"], style_schema)

        assert [r.item_code for r in result.records] == ["A1", "B2"]
        gaps = result.diagnostics_for(DiagnosticReason.FIELD_RECOVERY_GAP)
        assert [(d.line_index, d.detail) for d in gaps] == [(0, "quantity"), (0, "unit_price")]

    def test_missing_item_code_is_reported(self, style_schema):
        """Test that an anchor without any code drops its record."""
        result = extract(["Style:", "Total", "Style: B2", "Qty: 1"], style_schema)

        assert [r.item_code for r in result.records] == ["B2"]
        missing = result.diagnostics_for(DiagnosticReason.MISSING_ITEM_CODE)
        assert [d.line_index for d in missing] == [0]

    def test_empty_label_before_sizes_keeps_every_pair(self, size_schema):
        """Test that a label without value never swallows the first size line."""
        result = extract(["Item A1", "Price:", "XS", "1", "S", "2"], size_schema)

        assert [(r.size, r.quantity) for r in result.records] == [("XS", 1), ("S", 2)]
        assert all(r.unit_price is None for r in result.records)
        assert result.diagnostic_counts() == {"field_recovery_gap": 1}

    def test_document_without_anchor(self, style_schema):
        """Test text with no record starts."""
        result = extract(["Invoice", "Total", "5"], style_schema)

        assert result.records == []
        assert result.diagnostics == []
        assert result.success


class TestProperties:
    """Test properties that hold for any input."""

    def test_termination_and_non_negativity(self, size_schema, style_schema):
        """Test arbitrary line soups: always terminates, never negative."""
        rng = random.Random(20240917)
        for schema in (size_schema, style_schema):
            for _ in range(300):
                lines = random_soup(rng)
                result = extract(lines, schema)

                assert result.record_count <= len(lines)
                for record in result.records:
                    assert record.item_code
                    assert record.quantity >= 0
                    assert record.unit_price is None or record.unit_price >= 0
                    assert record.total_price is None or record.total_price >= 0

    @pytest.mark.parametrize("size_count", [0, 1, 2, 4])
    def test_size_expansion_law(self, size_schema, size_count):
        """Test that k size pairs give exactly k records (one when k is 0)."""
        sizes = ["XS", "S", "M", "L"][:size_count]
        lines = ["Item K-7", "Price: 4,00"]
        for n, size in enumerate(sizes, start=1):
            lines += [size, str(n)]

        records = extract(lines, size_schema).records

        assert len(records) == max(size_count, 1)
        if size_count:
            assert [r.size for r in records] == sizes
            assert all(r.total_price == r.unit_price * r.quantity for r in records)

    def test_idempotence(self, armedangels_schema, wyncken_schema):
        """Test that repeated runs give identical results."""
        for schema, lines in ((armedangels_schema, ARMEDANGELS_LINES),
                              (wyncken_schema, WYNCKEN_LINES)):
            first = extract(lines, schema)
            second = extract(list(lines), schema)
            assert first.to_json() == second.to_json()

    def test_pipeline_is_reusable(self, style_schema):
        """Test that one pipeline instance keeps no per-document state."""
        pipeline = ExtractionPipeline(style_schema, log_diagnostics=False)
        first = pipeline.run(SCENARIO_A_LINES)
        pipeline.run(["Style: X", "Qty: nope"])
        again = pipeline.run(SCENARIO_A_LINES)

        assert first.to_dict() == again.to_dict()

    def test_states(self):
        """Test the state machine vocabulary."""
        assert [s.name for s in PipelineState] == [
            "SEEK_ANCHOR", "COLLECT_FIELDS", "COLLECT_SIZES", "EMIT", "DONE"
        ]
