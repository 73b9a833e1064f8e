"""
Numeric Token Parser Module.

Locale-aware conversion of number and currency tokens found in vendor
documents:
    - "€ 26.50"      -> Decimal("26.50")
    - "1.234,56 EUR" -> Decimal("1234.56") with a comma-decimal locale
    - "12 Pcs."      -> None (not a bare number)

The parser only does lexical conversion. Whether a value is plausible
(a 1000x price, a zero quantity) is for the caller to judge.
"""

import re
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import List, Optional

from vendor_extraction.schema.vendor_schema import NumericLocale
from vendor_extraction.utils.logger import get_logger

logger = get_logger(__name__)

# Regular and non-breaking spaces, as produced by PDF text extraction
_SPACES = r'[ \t\u00a0\u202f]'


class NumericTokenParser:
    """
    Parses number tokens under one NumericLocale.

    Negative values, percentages and badly grouped digits are rejected
    rather than guessed: a missing value is preferable to a wrong one.

    Attributes:
        locale: The NumericLocale in use

    Example:
        >>> parser = NumericTokenParser(NumericLocale(",", "."))
        >>> parser.parse("1.234,56")
        Decimal('1234.56')
        >>> parser.parse("-3,00") is None
        True
    """

    def __init__(self, locale: NumericLocale) -> None:
        self.locale = locale

        decimal_sep = re.escape(locale.decimal_separator)
        if locale.thousands_separator.strip():
            thousands = re.escape(locale.thousands_separator)
        elif locale.thousands_separator:
            thousands = _SPACES
        else:
            thousands = None

        if thousands:
            integer = rf'(?:\d{{1,3}}(?:{thousands}\d{{3}})+|\d+)'
        else:
            integer = r'\d+'
        self._thousands_pattern = re.compile(thousands) if thousands else None

        self._number_re = re.compile(
            rf'^(?:{integer}(?:{decimal_sep}\d*)?|{decimal_sep}\d+)$'
        )
        self._amount_re = re.compile(
            rf'(?<![\d\-{decimal_sep}])(?:{integer}(?:{decimal_sep}\d+)?)(?![\d%])'
        )

        # Longest first so "EUR" is not left behind as "R" by a shorter token
        self._currency_tokens = sorted(
            (t for t in locale.currency_tokens if t), key=len, reverse=True
        )
        self._currency_re = None
        if self._currency_tokens:
            parts = []
            for token in self._currency_tokens:
                escaped = re.escape(token)
                if token.isalpha():
                    escaped = rf'(?<![A-Za-z]){escaped}(?![A-Za-z])'
                parts.append(escaped)
            self._currency_re = re.compile('|'.join(parts), re.IGNORECASE)

    def strip_currency(self, text: str) -> str:
        """
        Remove currency tokens from both ends of a token.

        Args:
            text: Raw token, e.g. "€ 26.50" or "52,83 eur".

        Returns:
            The token without leading/trailing currency marks.
        """
        value = text.strip()
        changed = True
        while changed and value:
            changed = False
            for token in self._currency_tokens:
                size = len(token)
                if value[:size].upper() == token.upper():
                    value = value[size:].strip()
                    changed = True
                if value and value[-size:].upper() == token.upper():
                    value = value[:-size].strip()
                    changed = True
        return value

    def parse(self, text: Optional[str]) -> Optional[Decimal]:
        """
        Parse one token into a non-negative Decimal.

        Args:
            text: Token text; currency marks at either end are allowed.

        Returns:
            Decimal value, or None for anything that is not a clean
            non-negative number in this locale. Never raises.
        """
        if text is None:
            return None

        value = self.strip_currency(str(text))
        if self._thousands_pattern is not None and not self.locale.thousands_separator.strip():
            value = re.sub(_SPACES + '+', ' ', value)

        if not value or not self._number_re.match(value):
            return None

        return self._to_decimal(value)

    def parse_quantity(self, text: Optional[str]) -> Optional[int]:
        """
        Parse a quantity: a number with no fractional part.

        "5" and "1.00" give 5 and 1; "2,5" gives None.
        """
        value = self.parse(text)
        if value is None or value != value.to_integral_value():
            return None
        return int(value)

    def find_amounts(self, text: Optional[str]) -> List[Decimal]:
        """
        Find every amount on a line.

        Args:
            text: A line such as "€ 26.50 € 132.50".

        Returns:
            Decimals in reading order (possibly empty). Negative numbers
            and percentages are skipped.

        Example:
            >>> parser.find_amounts("€ 10.00 € 50.00")
            [Decimal('10.00'), Decimal('50.00')]
        """
        if not text:
            return []

        cleaned = str(text)
        if self._currency_re is not None:
            cleaned = self._currency_re.sub(' ', cleaned)

        amounts = []
        for match in self._amount_re.finditer(cleaned):
            value = self._to_decimal(match.group(0))
            if value is not None:
                amounts.append(value)
        return amounts

    def _to_decimal(self, token: str) -> Optional[Decimal]:
        if self._thousands_pattern is not None:
            token = self._thousands_pattern.sub('', token)
        token = token.replace(self.locale.decimal_separator, '.')
        if token.endswith('.'):
            token = token[:-1]
        if token.startswith('.'):
            token = '0' + token

        try:
            value = Decimal(token)
        except InvalidOperation:
            logger.debug(f"Could not convert numeric token: {token!r}")
            return None

        if value < 0 or not value.is_finite():
            return None
        return value


@lru_cache(maxsize=32)
def get_parser(locale: NumericLocale) -> NumericTokenParser:
    """Shared parser per locale (locales are immutable and hashable)."""
    return NumericTokenParser(locale)


def parse_number(text: Optional[str], locale: NumericLocale) -> Optional[Decimal]:
    """
    Parse a number token under a locale.

    Args:
        text: Token such as "1.234,56" or "€ 26.50".
        locale: Separators and currency tokens to apply.

    Returns:
        Non-negative Decimal, or None when the text is malformed.

    Example:
        >>> parse_number("1.234,56", NumericLocale(",", "."))
        Decimal('1234.56')
    """
    return get_parser(locale).parse(text)


def parse_quantity(text: Optional[str], locale: NumericLocale) -> Optional[int]:
    """Parse an integral, non-negative quantity token."""
    return get_parser(locale).parse_quantity(text)


def find_amounts(text: Optional[str], locale: NumericLocale) -> List[Decimal]:
    """Find all amounts on a line, in reading order."""
    return get_parser(locale).find_amounts(text)
