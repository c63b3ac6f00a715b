"""
Error hierarchy shared by the parser, the type algebra and the rule-tree checker.
"""

from typing import Optional

from lambdaproof.core.info import Info


class LambdaProofError(Exception):
    """Base class for every error raised by lambdaproof."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class LambdaSyntaxError(LambdaProofError):
    """Surface text could not be parsed. Row and column are 1-based."""

    def __init__(self, message: str, row: int, column: int) -> None:
        self.row = row
        self.column = column
        super().__init__(message)

    def __str__(self) -> str:
        return f"Syntax error at row {self.row}, column {self.column}: {self.message}"


class RepresentationError(LambdaProofError):
    """A parsed term or type could not be converted relative to its context."""

    def __init__(self, message: str, info: Optional[Info] = None) -> None:
        self.info = info
        super().__init__(message)

    def __str__(self) -> str:
        if self.info is None:
            return self.message
        return f"{self.message} (row {self.info.line}, column {self.info.column})"


class SemanticError(LambdaProofError):
    pass


class TypeSystemError(SemanticError):
    """A term, type or context uses a form the selected type system forbids."""


class PremiseError(SemanticError):
    """The premises of a typing rule do not hold."""
