"""Source location information for IR nodes and errors."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class Span:
    """
    A region of the source document.

    ``start`` and ``end`` are byte offsets into the UTF-8 encoded source
    (end exclusive). ``line`` and ``column`` are 1-based and describe the
    start position.
    """
    start: int = 0
    end: int = 0
    line: int = 1
    column: int = 1

    def merge(self, other: "Span") -> "Span":
        """Return a span covering both spans."""
        first = self if (self.line, self.column) <= (other.line, other.column) else other
        return Span(
            start=min(self.start, other.start),
            end=max(self.end, other.end),
            line=first.line,
            column=first.column,
        )

    def shifted(self, offset: int, columns: int) -> "Span":
        """Span moved right on the same line by a byte and column offset."""
        return Span(self.start + offset, self.end + offset, self.line, self.column + columns)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class SourceMap:
    """Maps byte offsets in a document to 1-based line/column pairs."""

    def __init__(self, source: Union[str, bytes]):
        if isinstance(source, str):
            source = source.encode("utf-8")
        self.data = source
        self._line_starts: List[int] = [0]
        for index, byte in enumerate(source):
            if byte == 0x0A:
                self._line_starts.append(index + 1)

    def line_col(self, offset: int) -> tuple[int, int]:
        offset = max(0, min(offset, len(self.data)))
        line_index = bisect_right(self._line_starts, offset) - 1
        line_start = self._line_starts[line_index]
        # Columns count characters, not bytes
        column = len(self.data[line_start:offset].decode("utf-8", errors="replace")) + 1
        return line_index + 1, column

    def offset_of(self, line: int, column: int) -> int:
        """Byte offset of a 1-based line and 0-based character column."""
        line_index = max(0, min(line - 1, len(self._line_starts) - 1))
        line_start = self._line_starts[line_index]
        line_end = (
            self._line_starts[line_index + 1]
            if line_index + 1 < len(self._line_starts)
            else len(self.data)
        )
        prefix = self.data[line_start:line_end].decode("utf-8", errors="replace")[:column]
        return line_start + len(prefix.encode("utf-8"))

    def span(self, start: int, end: int) -> Span:
        line, column = self.line_col(start)
        return Span(start=start, end=end, line=line, column=column)


__all__ = ["Span", "SourceMap"]
