"""
Vendor Schema Module.

A VendorSchema is pure configuration: the patterns and vocabularies
that describe one vendor's text layout. Adding a vendor means writing a
schema (usually a YAML file under config/vendors/), never new control
flow. Patterns are compiled once when the schema is built so that a
broken regex is reported at load time, not halfway through a document.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from vendor_extraction.models.records import PRICE_FIELDS
from vendor_extraction.utils.exceptions import InvalidSchemaError


DEFAULT_CURRENCY_TOKENS = ('€', '$', '£', 'EUR', 'USD', 'GBP')


@dataclass(frozen=True)
class NumericLocale:
    """
    Number formatting conventions of a document.

    Attributes:
        decimal_separator: Character between integer and fraction
        thousands_separator: Digit group separator (may be a space or empty)
        currency_tokens: Symbols or codes stripped before parsing

    Example:
        >>> NumericLocale(decimal_separator=",", thousands_separator=".")
    """
    decimal_separator: str = "."
    thousands_separator: str = ","
    currency_tokens: Tuple[str, ...] = DEFAULT_CURRENCY_TOKENS

    def __post_init__(self) -> None:
        object.__setattr__(self, 'currency_tokens', tuple(self.currency_tokens))

        if len(self.decimal_separator) != 1 or self.decimal_separator.isdigit():
            raise InvalidSchemaError(
                "numeric_locale",
                f"decimal separator must be one non-digit character, "
                f"got {self.decimal_separator!r}"
            )
        if self.thousands_separator == self.decimal_separator:
            raise InvalidSchemaError(
                "numeric_locale",
                "decimal and thousands separators must differ"
            )
        if any(ch.isdigit() for ch in self.thousands_separator):
            raise InvalidSchemaError(
                "numeric_locale",
                f"thousands separator cannot contain digits: "
                f"{self.thousands_separator!r}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'NumericLocale':
        data = data or {}
        return cls(
            decimal_separator=str(data.get('decimal_separator', '.')),
            thousands_separator=str(data.get('thousands_separator', ',')),
            currency_tokens=tuple(
                str(t) for t in data.get('currency_tokens', DEFAULT_CURRENCY_TOKENS)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'decimal_separator': self.decimal_separator,
            'thousands_separator': self.thousands_separator,
            'currency_tokens': list(self.currency_tokens),
        }


def _pairs(value: Any) -> Tuple[Tuple[str, Any], ...]:
    """Normalize a mapping (or sequence of pairs) into an ordered tuple."""
    if value is None:
        return ()
    if isinstance(value, Mapping):
        items = value.items()
    else:
        items = value
    return tuple((str(k), v) for k, v in items)


def _strings(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class VendorSchema:
    """
    Configuration value parametrizing the extraction engine for one layout.

    Attributes:
        name: Vendor / layout name
        anchor_pattern: Regex matched at the start of a record-start line.
            The item code comes from the ``item_code`` named group, or
            group 1; other named groups become inline captures.
        label_vocabulary: Ordered (label text, field name) pairs. Earlier
            labels win over later ones targeting the same field.
        terminator_vocabulary: Regexes ending a window or breakdown
        size_code_vocabulary: Allowed size tokens
        window_bound: Maximum number of lines scanned after an anchor
        numeric_locale: Number formatting of the document
        inline_patterns: (field, regex) searched on the anchor line
        soft_fields: (field, regex) content patterns filling unset fields
        skip_patterns: Noise lines ignored inside windows and breakdowns
        description_strip_patterns: Regexes removed from descriptions
        size_aliases: Raw size token -> output size label
        default_size: Size used when a record has no size at all
        required_fields: Fields reported when missing after a window
        amount_overflow: Numeric field -> fields filled by the extra
            amounts found on the same value line

    Example:
        >>> schema = VendorSchema(
        ...     name="wyncken",
        ...     anchor_pattern=r"^Style:\\s*(?P<item_code>.*)$",
        ...     label_vocabulary={"Fabric": "fabric", "Qty": "quantity"},
        ... )
    """
    name: str
    anchor_pattern: str
    label_vocabulary: Tuple[Tuple[str, str], ...] = ()
    terminator_vocabulary: Tuple[str, ...] = ()
    size_code_vocabulary: FrozenSet[str] = frozenset()
    window_bound: int = 20
    numeric_locale: NumericLocale = field(default_factory=NumericLocale)
    inline_patterns: Tuple[Tuple[str, str], ...] = ()
    soft_fields: Tuple[Tuple[str, str], ...] = ()
    skip_patterns: Tuple[str, ...] = ()
    description_strip_patterns: Tuple[str, ...] = ()
    size_aliases: Tuple[Tuple[str, str], ...] = ()
    default_size: str = "One Size"
    required_fields: Tuple[str, ...] = ()
    amount_overflow: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()

    # Compiled forms, derived from the fields above
    anchor_regex: re.Pattern = field(init=False, repr=False, compare=False)
    label_regex: Optional[re.Pattern] = field(init=False, repr=False, compare=False)
    terminator_regexes: Tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)
    inline_regexes: Tuple[Tuple[str, re.Pattern], ...] = field(init=False, repr=False, compare=False)
    soft_field_regexes: Tuple[Tuple[str, re.Pattern], ...] = field(init=False, repr=False, compare=False)
    skip_regexes: Tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)
    strip_regexes: Tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Accept plain dicts/lists from callers and freeze them
        set_ = object.__setattr__
        set_(self, 'label_vocabulary',
             tuple((label, str(name)) for label, name in _pairs(self.label_vocabulary)))
        set_(self, 'terminator_vocabulary', _strings(self.terminator_vocabulary))
        set_(self, 'size_code_vocabulary',
             frozenset(str(s).strip() for s in self.size_code_vocabulary))
        set_(self, 'inline_patterns',
             tuple((name, str(p)) for name, p in _pairs(self.inline_patterns)))
        set_(self, 'soft_fields',
             tuple((name, str(p)) for name, p in _pairs(self.soft_fields)))
        set_(self, 'skip_patterns', _strings(self.skip_patterns))
        set_(self, 'description_strip_patterns', _strings(self.description_strip_patterns))
        set_(self, 'size_aliases',
             tuple((raw, str(label)) for raw, label in _pairs(self.size_aliases)))
        set_(self, 'required_fields', _strings(self.required_fields))
        set_(self, 'amount_overflow',
             tuple((name, _strings(targets)) for name, targets in _pairs(self.amount_overflow)))

        self._validate()

        set_(self, 'anchor_regex', self._compile(self.anchor_pattern, 'anchor_pattern'))
        set_(self, 'label_regex', self._build_label_regex())
        set_(self, 'terminator_regexes', tuple(
            self._compile(p, 'terminator_vocabulary', re.IGNORECASE)
            for p in self.terminator_vocabulary
        ))
        set_(self, 'inline_regexes', tuple(
            (name, self._compile(p, f'inline_patterns.{name}'))
            for name, p in self.inline_patterns
        ))
        set_(self, 'soft_field_regexes', tuple(
            (name, self._compile(p, f'soft_fields.{name}'))
            for name, p in self.soft_fields
        ))
        set_(self, 'skip_regexes', tuple(
            self._compile(p, 'skip_patterns') for p in self.skip_patterns
        ))
        set_(self, 'strip_regexes', tuple(
            self._compile(p, 'description_strip_patterns')
            for p in self.description_strip_patterns
        ))

        for name, regex in self.inline_regexes:
            if regex.groups < 1:
                raise InvalidSchemaError(
                    self.name, f"inline pattern for '{name}' needs a capture group"
                )

    def _validate(self) -> None:
        if not self.name:
            raise InvalidSchemaError("<unnamed>", "schema name is required")
        if not self.anchor_pattern:
            raise InvalidSchemaError(self.name, "anchor_pattern is required")
        if isinstance(self.window_bound, bool) or not isinstance(self.window_bound, int) \
                or self.window_bound < 1:
            raise InvalidSchemaError(
                self.name, f"window_bound must be a positive integer, got {self.window_bound!r}"
            )
        if not isinstance(self.numeric_locale, NumericLocale):
            raise InvalidSchemaError(self.name, "numeric_locale must be a NumericLocale")

        for source, targets in self.amount_overflow:
            for name in (source,) + targets:
                if name not in PRICE_FIELDS:
                    raise InvalidSchemaError(
                        self.name,
                        f"amount_overflow only links price fields {PRICE_FIELDS}, got '{name}'"
                    )

        for label, _ in self.label_vocabulary:
            if not _label_text(label):
                raise InvalidSchemaError(self.name, "empty label in label_vocabulary")

    def _compile(self, pattern: str, where: str, flags: int = 0) -> re.Pattern:
        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise InvalidSchemaError(self.name, f"bad regex in {where}: {e}")

    def _build_label_regex(self) -> Optional[re.Pattern]:
        """
        One alternation over all labels, longest first so that
        "European RRP" is tried before "RRP".
        """
        if not self.label_vocabulary:
            return None

        labels = sorted(
            {_label_text(label) for label, _ in self.label_vocabulary},
            key=lambda text: (-len(text), text)
        )
        alternatives = '|'.join(
            re.escape(label).replace(r'\ ', r'\s+') for label in labels
        )
        return re.compile(
            rf'^(?P<label>{alternatives})\s*(?::\s*(?P<value>.*?))?\s*$',
            re.IGNORECASE
        )

    # -------------------------------------------------------------------------
    # Lookup views
    # -------------------------------------------------------------------------

    @property
    def label_fields(self) -> Dict[str, Tuple[str, int]]:
        """Normalized label text -> (field name, priority rank)."""
        mapping: Dict[str, Tuple[str, int]] = {}
        for rank, (label, name) in enumerate(self.label_vocabulary):
            mapping.setdefault(label_key(label), (name, rank))
        return mapping

    @property
    def size_alias_map(self) -> Dict[str, str]:
        return dict(self.size_aliases)

    @property
    def overflow_map(self) -> Dict[str, Tuple[str, ...]]:
        return dict(self.amount_overflow)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'VendorSchema':
        """
        Build a schema from a plain dictionary (e.g. parsed YAML).

        Args:
            data: Dictionary with schema keys.

        Returns:
            VendorSchema instance.

        Raises:
            InvalidSchemaError: If a key has the wrong shape or a
                pattern does not compile.
        """
        name = str(data.get('name') or '')
        try:
            return cls(
                name=name,
                anchor_pattern=str(data.get('anchor_pattern') or ''),
                label_vocabulary=data.get('label_vocabulary') or {},
                terminator_vocabulary=data.get('terminator_vocabulary') or (),
                size_code_vocabulary=frozenset(
                    str(s) for s in (data.get('size_code_vocabulary') or ())
                ),
                window_bound=data.get('window_bound', 20),
                numeric_locale=NumericLocale.from_dict(data.get('numeric_locale')),
                inline_patterns=data.get('inline_patterns') or {},
                soft_fields=data.get('soft_fields') or {},
                skip_patterns=data.get('skip_patterns') or (),
                description_strip_patterns=data.get('description_strip_patterns') or (),
                size_aliases=data.get('size_aliases') or {},
                default_size=str(data.get('default_size', 'One Size')),
                required_fields=data.get('required_fields') or (),
                amount_overflow=data.get('amount_overflow') or {},
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidSchemaError(name or "<unnamed>", str(e))

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the schema (inverse of from_dict)."""
        return {
            'name': self.name,
            'anchor_pattern': self.anchor_pattern,
            'label_vocabulary': dict(self.label_vocabulary),
            'terminator_vocabulary': list(self.terminator_vocabulary),
            'size_code_vocabulary': sorted(self.size_code_vocabulary),
            'window_bound': self.window_bound,
            'numeric_locale': self.numeric_locale.to_dict(),
            'inline_patterns': dict(self.inline_patterns),
            'soft_fields': dict(self.soft_fields),
            'skip_patterns': list(self.skip_patterns),
            'description_strip_patterns': list(self.description_strip_patterns),
            'size_aliases': dict(self.size_aliases),
            'default_size': self.default_size,
            'required_fields': list(self.required_fields),
            'amount_overflow': {k: list(v) for k, v in self.amount_overflow},
        }


def _label_text(label: str) -> str:
    # "Fabric:" and "Fabric" name the same label
    return label.strip().rstrip(':').strip()


def label_key(label: str) -> str:
    """Normalize label text for lookup in VendorSchema.label_fields."""
    return ' '.join(_label_text(label).split()).lower()


__all__ = ['NumericLocale', 'VendorSchema', 'label_key']
