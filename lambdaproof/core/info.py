from dataclasses import dataclass


@dataclass(frozen=True)
class Info:
    """Source position of a node, 1-based."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"
