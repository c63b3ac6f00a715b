"""
First pass over a rule tree: parse every text field.

The context of a node is parsed first; its term and type are resolved against
it. When any field of a node fails, all of its descendants are marked as
blocked instead of being parsed.
"""

from typing import Callable, TypeVar

from lambdaproof.core.context import Context
from lambdaproof.errors import LambdaSyntaxError, RepresentationError
from lambdaproof.parser.parser import parse_context, parse_term, parse_type
from lambdaproof.ruletree.nodes import (
    BLOCKED,
    ParsedTree,
    ParseError,
    ParseErrorKind,
    ParseResult,
    RuleTree,
)


R = TypeVar("R")


def _attempt(parse: Callable[[], R]) -> ParseResult[R]:
    try:
        return ParseResult(value=parse())
    except LambdaSyntaxError as e:
        return ParseResult(
            error=ParseError(ParseErrorKind.SYNTAX, e.message, e.row, e.column)
        )
    except RepresentationError as e:
        return ParseResult(error=ParseError(ParseErrorKind.REPRESENTATION, str(e)))


def _blocked(tree: RuleTree) -> ParsedTree:
    blocked: ParseResult = ParseResult(error=BLOCKED)
    return ParsedTree(
        blocked,
        blocked,
        blocked,
        tuple(_blocked(child) for child in tree.children),
    )


def parse_tree(tree: RuleTree) -> ParsedTree:
    context_result: ParseResult[Context] = _attempt(lambda: parse_context(tree.context_text))
    ctx = context_result.value
    if ctx is None:
        context_blocked: ParseResult = ParseResult(error=BLOCKED)
        return ParsedTree(
            context_result,
            context_blocked,
            context_blocked,
            tuple(_blocked(child) for child in tree.children),
        )

    term_result = _attempt(lambda: parse_term(tree.term_text, ctx))
    type_result = _attempt(lambda: parse_type(tree.type_text, ctx))
    if not (term_result.ok and type_result.ok):
        children = tuple(_blocked(child) for child in tree.children)
    else:
        children = tuple(parse_tree(child) for child in tree.children)
    return ParsedTree(context_result, term_result, type_result, children)
