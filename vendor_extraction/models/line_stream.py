"""
Line Stream Data Class.

An immutable, index-addressable sequence of trimmed, non-empty text
lines. One stream is produced per document and shared read-only by all
scanner stages.
"""

from typing import Iterator, Tuple, Union, overload


class LineStream:
    """
    Immutable ordered sequence of non-empty lines.

    Example:
        >>> stream = LineStream(("Style:", "ABC123 JACKET"))
        >>> len(stream)
        2
        >>> stream[1]
        'ABC123 JACKET'
    """

    __slots__ = ('_lines',)

    def __init__(self, lines: Tuple[str, ...] = ()) -> None:
        self._lines = tuple(lines)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[str, ...]: ...

    def __getitem__(self, index: Union[int, slice]):
        return self._lines[index]

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LineStream):
            return self._lines == other._lines
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._lines)

    def __repr__(self) -> str:
        return f"LineStream(lines={len(self._lines)})"

    @property
    def lines(self) -> Tuple[str, ...]:
        """The underlying tuple of lines."""
        return self._lines

    def get(self, index: int) -> str:
        """Return the line at index, or an empty string past the end."""
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return ""
