"""
Extraction Pipeline Module.

Drives the scanner over one document as a small state machine:

    SEEK_ANCHOR -> COLLECT_FIELDS -> COLLECT_SIZES -> EMIT -> SEEK_ANCHOR

A single cursor moves strictly forward; every line belongs to at most
one record (the first anchor that reaches it). The pipeline is pure:
the same lines and schema always give the same result.
"""

from enum import Enum
from typing import Iterable, Optional, Union

from config import get_config
from vendor_extraction.models.extraction_result import ExtractionResult
from vendor_extraction.models.line_stream import LineStream
from vendor_extraction.models.records import Diagnostic, DiagnosticReason
from vendor_extraction.scanner.anchor import AnchorMatch, next_anchor
from vendor_extraction.scanner.emitter import emit
from vendor_extraction.scanner.field_window import FieldWindow, extract_fields
from vendor_extraction.scanner.line_normalizer import normalize_lines, normalize_text
from vendor_extraction.scanner.size_breakdown import SizeBreakdown, collect_sizes
from vendor_extraction.schema.vendor_schema import VendorSchema
from vendor_extraction.utils.exceptions import StructuralInputError
from vendor_extraction.utils.logger import get_logger

logger = get_logger(__name__)

LineInput = Union[LineStream, Iterable[str], None]


class PipelineState(Enum):
    """States of the extraction state machine."""
    SEEK_ANCHOR = "seek_anchor"
    COLLECT_FIELDS = "collect_fields"
    COLLECT_SIZES = "collect_sizes"
    EMIT = "emit"
    DONE = "done"


class ExtractionPipeline:
    """
    Runs the scanner stages over a line stream for one vendor schema.

    The pipeline holds no per-document state between calls, so one
    instance may be reused for any number of documents.

    Attributes:
        schema: VendorSchema parametrizing every stage
        log_diagnostics: Whether each diagnostic is logged at DEBUG

    Example:
        >>> pipeline = ExtractionPipeline(load_vendor_schema("wyncken"))
        >>> result = pipeline.run(lines)
        >>> print(result.record_count, result.diagnostic_counts())
    """

    def __init__(self, schema: VendorSchema, log_diagnostics: Optional[bool] = None) -> None:
        self.schema = schema
        if log_diagnostics is None:
            log_diagnostics = get_config("extraction.log_diagnostics", True)
        self.log_diagnostics = bool(log_diagnostics)

    def run(self, lines: LineInput) -> ExtractionResult:
        """
        Extract records from a sequence of lines.

        Args:
            lines: A LineStream, or any ordered iterable of strings.

        Returns:
            ExtractionResult. A None or empty input gives zero records
            and exactly one STRUCTURAL_INPUT_ERROR diagnostic.
        """
        result = ExtractionResult(vendor=self.schema.name)

        try:
            stream = lines if isinstance(lines, LineStream) else normalize_lines(lines)
        except StructuralInputError as e:
            return self._structural_failure(result, e.details.get("reason") or e.message)

        return self._scan(stream, result)

    def run_text(self, raw_text: Optional[str]) -> ExtractionResult:
        """Extract records from raw text, splitting it into lines first."""
        result = ExtractionResult(vendor=self.schema.name)

        try:
            stream = normalize_text(raw_text)
        except StructuralInputError as e:
            return self._structural_failure(result, e.details.get("reason") or e.message)

        return self._scan(stream, result)

    def _scan(self, stream: LineStream, result: ExtractionResult) -> ExtractionResult:
        result.line_count = len(stream)
        if not stream:
            return self._structural_failure(result, "empty line stream")

        diagnostics = result.diagnostics
        schema = self.schema

        state = PipelineState.SEEK_ANCHOR
        cursor = 0
        anchor: Optional[AnchorMatch] = None
        window: Optional[FieldWindow] = None
        breakdown: Optional[SizeBreakdown] = None

        # Each record costs four transitions, plus the final failed seek
        max_steps = 4 * (len(stream) + 1)
        steps = 0

        while state is not PipelineState.DONE:
            steps += 1
            if steps > max_steps:
                logger.warning(
                    f"Step bound {max_steps} reached at line {cursor}; stopping scan"
                )
                break

            if state is PipelineState.SEEK_ANCHOR:
                anchor = next_anchor(stream, cursor, schema)
                state = PipelineState.DONE if anchor is None else PipelineState.COLLECT_FIELDS

            elif state is PipelineState.COLLECT_FIELDS:
                window = extract_fields(stream, anchor, schema, diagnostics)
                state = PipelineState.COLLECT_SIZES

            elif state is PipelineState.COLLECT_SIZES:
                breakdown = collect_sizes(stream, window.stop_index, schema, diagnostics)
                for size_code, quantity in breakdown.pairs:
                    window.raw_record.add_size(size_code, quantity)
                state = PipelineState.EMIT

            elif state is PipelineState.EMIT:
                records = emit(window.raw_record, schema, diagnostics, stream[anchor.index])
                for record in records:
                    result.add_record(record)
                cursor = max(anchor.index + 1, window.stop_index, breakdown.stop_index)
                state = PipelineState.SEEK_ANCHOR

        self._log_summary(result)
        return result

    def _structural_failure(self, result: ExtractionResult, reason: str) -> ExtractionResult:
        logger.warning(f"Cannot extract with schema '{self.schema.name}': {reason}")
        result.add_diagnostic(
            Diagnostic(-1, "", DiagnosticReason.STRUCTURAL_INPUT_ERROR, reason)
        )
        return result

    def _log_summary(self, result: ExtractionResult) -> None:
        logger.info(
            f"Extracted {result.record_count} records "
            f"({len(result.item_codes)} items) from {result.line_count} lines "
            f"with schema '{self.schema.name}', {len(result.diagnostics)} diagnostics"
        )
        if self.log_diagnostics:
            for diagnostic in result.diagnostics:
                logger.debug(
                    f"  [{diagnostic.reason.value}] line {diagnostic.line_index}: "
                    f"{diagnostic.raw_text!r} {diagnostic.detail or ''}".rstrip()
                )


def extract(lines: LineInput, schema: VendorSchema) -> ExtractionResult:
    """
    Extract line items from an ordered sequence of text lines.

    Args:
        lines: Lines as produced by the PDF text extractor (a LineStream
            or any iterable of strings; None is reported, not raised).
        schema: VendorSchema describing the document layout.

    Returns:
        ExtractionResult with ordered records and diagnostics.

    Example:
        >>> result = extract(["Style:", "ABC123 JACKET", "Qty", "5"], schema)
        >>> result.records[0].quantity
        5
    """
    return ExtractionPipeline(schema).run(lines)


def extract_text(raw_text: Optional[str], schema: VendorSchema) -> ExtractionResult:
    """Extract line items from raw multi-line text."""
    return ExtractionPipeline(schema).run_text(raw_text)
