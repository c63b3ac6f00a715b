"""
Derivation trees as edited by a caller, and the parallel trees produced by
the parse and check passes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar

from lambdaproof.core.context import Context
from lambdaproof.core.terms import Term
from lambdaproof.core.types import Type
from lambdaproof.typechecker.substitution import Substitution
from lambdaproof.typechecker.systems import TypeSystem

T = TypeVar("T")


class Rule(str, Enum):
    NONE = "none"
    VAR = "var"
    ABS = "abs"
    APP = "app"
    IF = "if"
    TABS = "tabs"
    TAPP = "tapp"
    LET = "let"
    CONST = "const"
    GEN = "gen"
    INST = "inst"

    @property
    def premise_count(self) -> Optional[int]:
        match self:
            case Rule.NONE:
                return None
            case Rule.VAR | Rule.CONST:
                return 0
            case Rule.ABS | Rule.TABS | Rule.TAPP | Rule.GEN | Rule.INST:
                return 1
            case Rule.APP | Rule.LET:
                return 2
            case Rule.IF:
                return 3


RULES_BY_SYSTEM = {
    TypeSystem.SIMPLY_TYPED: frozenset(
        {Rule.NONE, Rule.VAR, Rule.ABS, Rule.APP, Rule.IF, Rule.CONST}
    ),
    TypeSystem.HINDLEY_MILNER: frozenset(
        {
            Rule.NONE,
            Rule.VAR,
            Rule.ABS,
            Rule.APP,
            Rule.IF,
            Rule.CONST,
            Rule.LET,
            Rule.GEN,
            Rule.INST,
        }
    ),
    TypeSystem.SYSTEM_F: frozenset(
        {
            Rule.NONE,
            Rule.VAR,
            Rule.ABS,
            Rule.APP,
            Rule.IF,
            Rule.CONST,
            Rule.LET,
            Rule.TABS,
            Rule.TAPP,
        }
    ),
}


@dataclass(frozen=True)
class RuleTree:
    """One typing judgment ``context ⊢ term : type`` and its premises."""

    context_text: str
    term_text: str
    type_text: str
    rule: Rule = Rule.NONE
    children: Tuple["RuleTree", ...] = ()
    substitution: Substitution = field(default_factory=Substitution)


class ParseErrorKind(str, Enum):
    SYNTAX = "syntax"
    REPRESENTATION = "representation"
    PREREQUISITE = "prerequisite"


@dataclass(frozen=True)
class ParseError:
    kind: ParseErrorKind
    message: str
    row: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.kind is ParseErrorKind.SYNTAX:
            return f"Syntax error at row {self.row}, column {self.column}: {self.message}"
        return self.message


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


BLOCKED = ParseError(ParseErrorKind.PREREQUISITE, "Prerequisite failed")


@dataclass(frozen=True)
class ParsedTree:
    context: ParseResult[Context]
    term: ParseResult[Term]
    type: ParseResult[Type]
    children: Tuple["ParsedTree", ...] = ()

    @property
    def ok(self) -> bool:
        return self.context.ok and self.term.ok and self.type.ok

    @property
    def first_error(self) -> Optional[ParseError]:
        for result in (self.context, self.term, self.type):
            if result.error is not None:
                return result.error
        return None


class VerdictKind(str, Enum):
    SUCCESS = "success"
    NO_RULE = "no-rule"
    SYNTAX_ERROR = "syntax"
    REPRESENTATION_ERROR = "representation"
    PREREQUISITE_FAILED = "prerequisite"
    NOT_IN_SYSTEM = "not-in-system"
    PREMISE_FAILED = "premise"


@dataclass(frozen=True)
class Verdict:
    kind: VerdictKind
    message: str
    ty: Optional[Type] = None
    row: Optional[int] = None
    column: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.kind is VerdictKind.SUCCESS

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class CheckedTree:
    context: ParseResult[Context]
    term: ParseResult[Term]
    type: ParseResult[Type]
    rule: Rule
    verdict: Verdict
    children: Tuple["CheckedTree", ...] = ()

    @property
    def ok(self) -> bool:
        """True when this node and every descendant succeeded."""
        return self.verdict.ok and all(child.ok for child in self.children)
