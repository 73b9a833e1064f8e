"""
Field Window Extractor Module.

Scans the bounded window of lines after an anchor and fills a
RawRecord from labels, soft-field patterns and free text.

Line classification order inside the window:
    1. next anchor      -> stop, line left for the next record
    2. terminator       -> stop
    3. size code        -> stop, the size breakdown starts here
    4. skip pattern     -> ignored
    5. label            -> inline value, or the next non-noise line when it
                           is not a boundary or size code
    6. soft field       -> value used only if no label supplied it
    7. free text        -> description, until the first label
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from vendor_extraction.models.line_stream import LineStream
from vendor_extraction.models.records import (
    Diagnostic,
    DiagnosticReason,
    INLINE_RANK,
    PRICE_FIELDS,
    QUANTITY_FIELD,
    RawRecord
)
from vendor_extraction.scanner.anchor import AnchorMatch
from vendor_extraction.scanner.classifier import (
    is_anchor,
    is_boundary,
    is_size_code,
    is_skip_line,
    is_terminator,
    match_label
)
from vendor_extraction.scanner.numeric import NumericTokenParser, get_parser
from vendor_extraction.schema.vendor_schema import VendorSchema
from vendor_extraction.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FieldWindow:
    """
    Result of scanning one window.

    Attributes:
        raw_record: The populated accumulator
        stop_index: First line index not consumed by the window
    """
    raw_record: RawRecord
    stop_index: int


def extract_fields(stream: LineStream, anchor: AnchorMatch, schema: VendorSchema,
                   diagnostics: List[Diagnostic]) -> FieldWindow:
    """
    Populate a RawRecord from the lines following an anchor.

    Args:
        stream: Normalized document lines.
        anchor: The anchor that opened this record.
        schema: Vendor schema.
        diagnostics: List that recovery notes are appended to.

    Returns:
        FieldWindow whose stop_index is at least anchor.index + 1 and
        at most anchor.index + 1 + window_bound.
    """
    extractor = _WindowScanner(stream, anchor, schema, diagnostics)
    return extractor.scan()


class _WindowScanner:
    """State for one window scan."""

    def __init__(self, stream: LineStream, anchor: AnchorMatch, schema: VendorSchema,
                 diagnostics: List[Diagnostic]) -> None:
        self.stream = stream
        self.anchor = anchor
        self.schema = schema
        self.diagnostics = diagnostics
        self.parser: NumericTokenParser = get_parser(schema.numeric_locale)
        self.record = RawRecord(anchor_index=anchor.index, item_code=anchor.item_code)
        self.limit = min(len(stream), anchor.index + 1 + schema.window_bound)

    def scan(self) -> FieldWindow:
        anchor_line = self.stream[self.anchor.index]
        for name, value in self.anchor.inline_captures.items():
            self._store(name, value, INLINE_RANK, self.anchor.index, anchor_line)

        cursor = self.anchor.index + 1

        if not self.record.item_code:
            code_index = self._value_line(cursor)
            if code_index is not None:
                self.record.item_code = ' '.join(self.stream[code_index].split())
                cursor = code_index + 1

        seen_label = False
        while cursor < self.limit:
            line = self.stream[cursor]

            if (is_anchor(line, self.schema)
                    or is_terminator(line, self.schema)
                    or is_size_code(line, self.schema)):
                break

            if is_skip_line(line, self.schema):
                cursor += 1
                continue

            label = match_label(line, self.schema)
            if label is not None:
                seen_label = True
                label_index = cursor
                value = label.value
                if value is None:
                    value_index = self._value_line(cursor + 1)
                    if value_index is not None:
                        value = self.stream[value_index]
                        cursor = value_index

                if value is None:
                    self._note(label_index, line, DiagnosticReason.FIELD_RECOVERY_GAP,
                               label.field_name)
                else:
                    self._store(label.field_name, value, label.rank, cursor, self.stream[cursor])
                cursor += 1
                continue

            if self._match_soft_fields(cursor, line):
                cursor += 1
                continue

            if not seen_label:
                self.record.add_description(line)
            cursor += 1

        self._report_missing_required(anchor_line)
        return FieldWindow(raw_record=self.record, stop_index=cursor)

    def _value_line(self, index: int) -> Optional[int]:
        """
        Index of the first line at or after ``index`` that can carry a value.

        Skip lines are stepped over. Anchors, terminators, labels and size
        codes cannot be values; None is returned for them and at the limit.
        """
        while index < self.limit and is_skip_line(self.stream[index], self.schema):
            index += 1
        if index >= self.limit:
            return None
        line = self.stream[index]
        if is_boundary(line, self.schema) or is_size_code(line, self.schema):
            return None
        return index

    def _match_soft_fields(self, index: int, line: str) -> bool:
        matched = False
        for name, regex in self.schema.soft_field_regexes:
            found = regex.search(line)
            if found is None:
                continue
            value = found.group(1) if regex.groups and found.group(1) else found.group(0)
            value = ' '.join(value.split())
            if not value:
                continue
            matched = True
            if name == QUANTITY_FIELD or name in PRICE_FIELDS:
                parsed = self._parse_numeric(name, value)
                if parsed is None:
                    self._note(index, line, DiagnosticReason.NUMERIC_PARSE_FAILURE, name)
                else:
                    self.record.set_soft_field(name, parsed[0])
            else:
                self.record.set_soft_field(name, value)
        return matched

    def _store(self, name: str, value: str, rank: int, line_index: int, raw_text: str) -> None:
        """Convert and store one labeled or inline value."""
        if name == QUANTITY_FIELD or name in PRICE_FIELDS:
            parsed = self._parse_numeric(name, value)
            if parsed is None:
                self._note(line_index, raw_text, DiagnosticReason.NUMERIC_PARSE_FAILURE, name)
                return

            self.record.set_field(name, parsed[0], rank)
            targets = self.schema.overflow_map.get(name, ())
            for target, extra in zip(targets, parsed[1:]):
                self.record.set_field(target, extra, rank)
            return

        text = ' '.join(value.split())
        if text:
            self.record.set_field(name, text, rank)

    def _parse_numeric(self, name: str, value: str) -> Optional[List[Any]]:
        """
        Parse a numeric field value.

        Returns:
            List of parsed values, first one for the field itself and
            the rest as overflow amounts; None when nothing parses.
        """
        if name == QUANTITY_FIELD:
            quantity = self.parser.parse_quantity(value)
            if quantity is not None:
                return [quantity]
            for amount in self.parser.find_amounts(value):
                if amount == amount.to_integral_value():
                    return [int(amount)]
            return None

        amounts = self.parser.find_amounts(value)
        return list(amounts) or None

    def _report_missing_required(self, anchor_line: str) -> None:
        for name in self.schema.required_fields:
            if name == 'item_code':
                continue
            if not self.record.has_field(name):
                self._note(self.anchor.index, anchor_line,
                           DiagnosticReason.FIELD_RECOVERY_GAP, name)

    def _note(self, line_index: int, raw_text: str, reason: DiagnosticReason,
              detail: Optional[str] = None) -> None:
        logger.debug(f"{reason.value} at line {line_index} ({detail}): {raw_text!r}")
        self.diagnostics.append(Diagnostic(line_index, raw_text, reason, detail))
