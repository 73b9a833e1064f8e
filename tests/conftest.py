"""
Shared fixtures for the extraction engine tests.
"""

import pytest

from vendor_extraction.models.line_stream import LineStream
from vendor_extraction.schema import NumericLocale, VendorSchema, load_vendor_schema


DOT_LOCALE = NumericLocale(".", ",", ("€", "EUR"))
COMMA_LOCALE = NumericLocale(",", ".", ("EUR", "€"))

SCENARIO_A_LINES = [
    "Style:",
    "ABC123 JACKET",
    "Fabric: WOOL",
    "Colour:",
    "Blue",
    "Qty",
    "5",
    "Unit Price",
    "€ 10.00 € 50.00",
]

WYNCKEN_LINES = [
    "Style:",
    "WK20W170 PULL ON PATCH",
    "JEAN LIGHT WEIGHT",
    "Fabric: COTTON",
    "Colour: MID WASH DENIM",
    "Description:",
    "COO: IN D",
    "100% COTTON",
    "Material Content: HTS: MID: Type:",
    "Qty",
    "5",
    "Unit Price",
    "€ 26.50 € 132.50",
    "Total",
    "5",
]

ARMEDANGELS_LINES = [
    "Order confirmation",
    "1 30005160 3231 black 6 Pcs. 29,95 EUR 179,70 EUR",
    "TWEEDAA JACKET TWEED WOOL BLEND",
    "GOTS organic",
    "XS",
    "1",
    "S",
    "2",
    "M",
    "3",
    "2 30005299 1234 ocean blue 2 Pcs. 1.049,00 EUR 2.098,00 EUR",
    "MIRAAMA DRESS",
    "Shipping",
    "Total 2.277,70 EUR",
]


@pytest.fixture
def dot_locale():
    return DOT_LOCALE


@pytest.fixture
def comma_locale():
    return COMMA_LOCALE


@pytest.fixture
def style_schema():
    """Labelled layout with a bare "Style:" anchor."""
    return VendorSchema(
        name="style",
        anchor_pattern=r"^Style:\s*(?P<item_code>.*)$",
        label_vocabulary={
            "Fabric": "fabric",
            "Colour": "colour",
            "Description": "description",
            "Qty": "quantity",
            "Unit Price": "unit_price",
        },
        terminator_vocabulary=[r"^Total$"],
        window_bound=10,
        numeric_locale=DOT_LOCALE,
        soft_fields={"material": r"\d+\s*%\s*\w+"},
        skip_patterns=[r"^Page \d+$"],
        required_fields=["quantity", "unit_price"],
        amount_overflow={"unit_price": ["total_price"]},
    )


@pytest.fixture
def size_schema():
    """Layout whose records end in size/quantity pairs."""
    return VendorSchema(
        name="sizes",
        anchor_pattern=r"^Item\s+(\S+)",
        label_vocabulary={"Price": "unit_price"},
        terminator_vocabulary=[r"^Total\b"],
        size_code_vocabulary={"XS", "S", "M", "L", "2Y-3Y"},
        window_bound=5,
        numeric_locale=COMMA_LOCALE,
        skip_patterns=[r"^GOTS$"],
        size_aliases={"2Y-3Y": "2 jaar"},
    )


@pytest.fixture
def wyncken_schema():
    return load_vendor_schema("wyncken")


@pytest.fixture
def armedangels_schema():
    return load_vendor_schema("armedangels")


def make_stream(lines):
    return LineStream(tuple(lines))
