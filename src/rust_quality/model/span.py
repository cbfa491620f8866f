"""SourceSpan — an immutable, half-open region of a source file."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class SourceSpan:
    """Region ``[start, end)`` of a file.

    Lines are 1-indexed, columns are 0-indexed character offsets within the
    line.  A span that ends at column 0 of the following line covers the
    whole previous line including its newline.
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __post_init__(self) -> None:
        if self.start_line < 1 or self.end_line < 1:
            raise ValueError(f"span lines are 1-indexed: {self}")
        if self.start_col < 0 or self.end_col < 0:
            raise ValueError(f"span columns must be >= 0: {self}")
        if self.start >= self.end:
            raise ValueError(f"span must be non-empty: {self}")

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_line, self.start_col)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_col)

    @property
    def line_count(self) -> int:
        """Number of lines touched by the span."""
        last = self.end_line - 1 if self.end_col == 0 else self.end_line
        return max(last, self.start_line) - self.start_line + 1

    def overlaps(self, other: SourceSpan) -> bool:
        return self.start < other.end and other.start < self.end

    def contains_point(self, line: int, col: int) -> bool:
        return self.start <= (line, col) < self.end

    def to_dict(self) -> dict:
        return {
            "start_line": self.start_line,
            "start_col": self.start_col,
            "end_line": self.end_line,
            "end_col": self.end_col,
        }

    @classmethod
    def whole_line(cls, line: int) -> SourceSpan:
        """Span of *line* including its trailing newline."""
        return cls(line, 0, line + 1, 0)
