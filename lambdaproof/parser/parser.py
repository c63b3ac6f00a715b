from functools import lru_cache
from typing import Any, List, Tuple

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from lambdaproof.core.context import EMPTY_CONTEXT, Context
from lambdaproof.core.terms import Term
from lambdaproof.core.types import Type
from lambdaproof.errors import LambdaSyntaxError
from lambdaproof.parser.convert import convert_context, convert_term, convert_type
from lambdaproof.parser.preprocess import preprocess_with_offsets
from lambdaproof.parser.transformer import transform_parse_tree

START_SYMBOLS = ["start_term", "start_type", "start_context"]


@lru_cache(maxsize=1)
def _lark() -> Lark:
    return Lark.open(
        "lambdaproof.lark",
        rel_to=__file__,
        parser="lalr",
        lexer="basic",
        start=START_SYMBOLS,
        propagate_positions=True,
    )


def _end_position(text: str) -> Tuple[int, int]:
    lines = text.split("\n")
    return len(lines), len(lines[-1]) + 1


def _position(text: str, offset: int) -> Tuple[int, int]:
    row = text.count("\n", 0, offset) + 1
    return row, offset - text.rfind("\n", 0, offset)


def _describe(error: UnexpectedInput) -> str:
    match error:
        case UnexpectedCharacters(char=char):
            return f"unexpected character {char!r}"
        case UnexpectedToken(token=token) if token.type == "$END":
            return "unexpected end of input"
        case UnexpectedToken(token=token, expected=expected):
            return f"unexpected {token.value!r}, expected one of {sorted(expected)}"
        case _:
            return "invalid input"


def _syntax_error(
    error: UnexpectedInput, text: str, offsets: List[int]
) -> LambdaSyntaxError:
    """Report ``error`` at its row and column in ``text``, the unrewritten input.

    ``offsets`` maps positions in the rewritten source back to ``text``.
    """
    at_end = isinstance(error, UnexpectedToken) and error.token.type == "$END"
    pos = getattr(error, "pos_in_stream", None)
    if at_end or pos is None or pos < 0 or pos >= len(offsets):
        row, column = _end_position(text)
    else:
        row, column = _position(text, offsets[pos])
    return LambdaSyntaxError(_describe(error), row, column)


def _parse(text: str, start: str) -> Any:
    source, offsets = preprocess_with_offsets(text)
    try:
        tree = _lark().parse(source, start=start)
    except UnexpectedInput as e:
        raise _syntax_error(e, text, offsets) from e
    return transform_parse_tree(tree)


def parse_surface_term(text: str) -> Any:
    return _parse(text, "start_term")


def parse_surface_type(text: str) -> Any:
    return _parse(text, "start_type")


def parse_term(text: str, ctx: Context = EMPTY_CONTEXT) -> Term:
    """Parse a term and resolve its variables against ``ctx``.

    Raises LambdaSyntaxError for malformed text and RepresentationError for
    names that are not bound in ``ctx``.
    """
    return convert_term(ctx, parse_surface_term(text))


def parse_type(text: str, ctx: Context = EMPTY_CONTEXT) -> Type:
    return convert_type(ctx, parse_surface_type(text))


def parse_context(text: str) -> Context:
    """Parse ``x: Bool, X, f: X → X``; the rightmost binding ends up on top."""
    return convert_context(_parse(text, "start_context"))
