"""
Second pass over a rule tree: check every node against its selected rule.

A node is checked against the parsed values of its direct children only, so a
failing rule never stops the children from being checked and reported.

Premise and conclusion types are compared with structural equality, not
unification. A free type name in a node is either a base type or a variable
fixed by the context. Instantiation is written out by the user, as the node's
substitution or as an inst step, so there is nothing left for unification to
solve.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from lambdaproof.core.context import Context, ContextError, TyVarBind, VarBind, equal_contexts
from lambdaproof.core.printer import show_context, show_term, show_type
from lambdaproof.core.terms import (
    Term,
    TmAbs,
    TmApp,
    TmConst,
    TmIf,
    TmLet,
    TmTAbs,
    TmTApp,
    TmVar,
    equal_terms,
)
from lambdaproof.core.types import (
    BOOL_TYPE,
    TyAll,
    TyArr,
    Type,
    equal_types,
    type_shift,
    type_subst_top,
)
from lambdaproof.errors import PremiseError, TypeSystemError
from lambdaproof.ruletree.nodes import (
    RULES_BY_SYSTEM,
    CheckedTree,
    ParsedTree,
    ParseError,
    ParseErrorKind,
    Rule,
    RuleTree,
    Verdict,
    VerdictKind,
)
from lambdaproof.ruletree.parse_pass import parse_tree
from lambdaproof.typechecker.generalize import degeneralize_top
from lambdaproof.typechecker.systems import (
    TypeSystem,
    check_context,
    check_term,
    check_type,
)
from lambdaproof.typechecker.unify import is_specialized_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Judgment:
    ctx: Context
    term: Term
    ty: Type

    def __str__(self) -> str:
        return (
            f"{show_context(self.ctx)} ⊢ "
            f"{show_term(self.term, self.ctx)} : {show_type(self.ty, self.ctx)}"
        )


def check_tree(tree: RuleTree, system: TypeSystem) -> CheckedTree:
    """Parse every node of ``tree`` and check it against its rule."""
    return check_parsed_tree(tree, parse_tree(tree), system)


def check_parsed_tree(
    tree: RuleTree,
    parsed: ParsedTree,
    system: TypeSystem,
) -> CheckedTree:
    verdict = check_node(tree, parsed, system)
    logger.debug("%s rule: %s (%s)", tree.rule.value, verdict.kind.value, verdict)
    children = tuple(
        check_parsed_tree(child, parsed_child, system)
        for child, parsed_child in zip(tree.children, parsed.children)
    )
    return CheckedTree(
        parsed.context,
        parsed.term,
        parsed.type,
        tree.rule,
        verdict,
        children,
    )


def _parse_verdict(error: ParseError) -> Verdict:
    match error.kind:
        case ParseErrorKind.SYNTAX:
            return Verdict(
                VerdictKind.SYNTAX_ERROR,
                str(error),
                row=error.row,
                column=error.column,
            )
        case ParseErrorKind.REPRESENTATION:
            return Verdict(VerdictKind.REPRESENTATION_ERROR, error.message)
        case ParseErrorKind.PREREQUISITE:
            return Verdict(VerdictKind.PREREQUISITE_FAILED, error.message)
        case _:
            raise ValueError(f"Unknown parse error kind: {error.kind}")


def _judgment(tree: RuleTree, parsed: ParsedTree) -> Judgment:
    ctx = tree.substitution.apply_context(parsed.context.value)
    return Judgment(ctx, parsed.term.value, tree.substitution.apply(parsed.type.value))


def check_node(tree: RuleTree, parsed: ParsedTree, system: TypeSystem) -> Verdict:
    error = parsed.first_error
    if error is not None:
        return _parse_verdict(error)

    if tree.rule not in RULES_BY_SYSTEM[system]:
        return Verdict(
            VerdictKind.NOT_IN_SYSTEM,
            f"The {tree.rule.value} rule is not part of {system.display_name}",
        )
    try:
        check_context(system, parsed.context.value)
        check_term(system, parsed.term.value)
        check_type(system, parsed.type.value)
    except TypeSystemError as e:
        return Verdict(VerdictKind.NOT_IN_SYSTEM, e.message)

    if tree.rule is Rule.NONE:
        return Verdict(VerdictKind.NO_RULE, "No rule selected")

    expected = tree.rule.premise_count
    if len(tree.children) != expected:
        return Verdict(
            VerdictKind.PREMISE_FAILED,
            f"The {tree.rule.value} rule needs {expected} premise(s), "
            f"found {len(tree.children)}",
        )
    for position, parsed_child in enumerate(parsed.children, start=1):
        if not parsed_child.ok:
            return Verdict(
                VerdictKind.PREREQUISITE_FAILED,
                f"Premise {position} could not be parsed",
            )

    conclusion = _judgment(tree, parsed)
    premises = [
        _judgment(child, parsed_child)
        for child, parsed_child in zip(tree.children, parsed.children)
    ]
    try:
        check_rule(tree.rule, system, conclusion, premises)
    except PremiseError as e:
        return Verdict(VerdictKind.PREMISE_FAILED, e.message)
    return Verdict(
        VerdictKind.SUCCESS,
        f"Correct application of the {tree.rule.value} rule",
        ty=conclusion.ty,
    )


def check_rule(
    rule: Rule,
    system: TypeSystem,
    conclusion: Judgment,
    premises: Sequence[Judgment],
) -> None:
    """Raise PremiseError unless ``premises`` justify ``conclusion`` by ``rule``."""
    match rule:
        case Rule.VAR:
            _check_var(system, conclusion)
        case Rule.ABS:
            _check_abs(conclusion, premises)
        case Rule.APP:
            _check_app(conclusion, premises)
        case Rule.IF:
            _check_if(conclusion, premises)
        case Rule.TABS:
            _check_tabs(conclusion, premises)
        case Rule.TAPP:
            _check_tapp(conclusion, premises)
        case Rule.LET:
            _check_let(conclusion, premises)
        case Rule.CONST:
            _check_const(conclusion)
        case Rule.GEN:
            _check_gen(conclusion, premises)
        case Rule.INST:
            _check_inst(conclusion, premises)
        case Rule.NONE:
            raise PremiseError("No rule selected")
        case _:
            raise ValueError(f"Unknown rule: {rule}")


# helpers


def _expect_context(position: int, actual: Context, expected: Context) -> None:
    if not equal_contexts(actual, expected):
        raise PremiseError(
            f"Premise {position}: expected context '{show_context(expected)}', "
            f"found '{show_context(actual)}'"
        )


def _expect_term(position: int, actual: Term, expected: Term, ctx: Context) -> None:
    if not equal_terms(actual, expected):
        raise PremiseError(
            f"Premise {position}: expected term '{show_term(expected, ctx)}', "
            f"found '{show_term(actual, ctx)}'"
        )


def _expect_type(what: str, actual: Type, expected: Type, ctx: Context) -> None:
    if not equal_types(actual, expected):
        raise PremiseError(
            f"{what}: expected type '{show_type(expected, ctx)}', "
            f"found '{show_type(actual, ctx)}'"
        )


def _expect_premise(
    position: int,
    premise: Judgment,
    ctx: Context,
    term: Term,
    ty: Type,
) -> None:
    _expect_context(position, premise.ctx, ctx)
    _expect_term(position, premise.term, term, ctx)
    _expect_type(f"Premise {position}", premise.ty, ty, ctx)


def _wrong_term(rule: Rule, needed: str, judgment: Judgment) -> PremiseError:
    return PremiseError(
        f"The {rule.value} rule needs {needed}, "
        f"found '{show_term(judgment.term, judgment.ctx)}'"
    )


# rules


def _check_var(system: TypeSystem, conclusion: Judgment) -> None:
    ctx, term, ty = conclusion.ctx, conclusion.term, conclusion.ty
    if not isinstance(term, TmVar):
        raise _wrong_term(Rule.VAR, "a variable", conclusion)
    try:
        name, binding = ctx.get(term.index)
    except ContextError as e:
        raise PremiseError(str(e)) from e
    if not isinstance(binding, VarBind):
        raise PremiseError(f"Variable {name} has no type in the context")
    bound_ty = ctx.type_of(term.index)
    if system is TypeSystem.HINDLEY_MILNER:
        if not is_specialized_type(ctx, ty, bound_ty):
            raise PremiseError(
                f"'{show_type(ty, ctx)}' is not an instance of "
                f"'{show_type(bound_ty, ctx)}', the type of {name}"
            )
        return
    _expect_type(f"Variable {name}", ty, bound_ty, ctx)


def _check_abs(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, term, ty = conclusion.ctx, conclusion.term, conclusion.ty
    if not isinstance(term, TmAbs):
        raise _wrong_term(Rule.ABS, "an abstraction", conclusion)
    if not isinstance(ty, TyArr):
        raise PremiseError(f"An abstraction needs a function type, found '{show_type(ty, ctx)}'")
    if term.ty is not None:
        _expect_type("Annotation", term.ty, ty.param, ctx)
    inner = ctx.add(term.name, VarBind(ty.param))
    _expect_premise(1, premises[0], inner, term.body, type_shift(1, ty.result))


def _check_app(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, term, ty = conclusion.ctx, conclusion.term, conclusion.ty
    if not isinstance(term, TmApp):
        raise _wrong_term(Rule.APP, "an application", conclusion)
    fn_premise, arg_premise = premises
    _expect_context(1, fn_premise.ctx, ctx)
    _expect_context(2, arg_premise.ctx, ctx)
    _expect_term(1, fn_premise.term, term.fn, ctx)
    _expect_term(2, arg_premise.term, term.arg, ctx)
    _expect_type("Premise 1", fn_premise.ty, TyArr(arg_premise.ty, ty), ctx)


def _check_if(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, term, ty = conclusion.ctx, conclusion.term, conclusion.ty
    if not isinstance(term, TmIf):
        raise _wrong_term(Rule.IF, "a conditional", conclusion)
    cond, then_premise, else_premise = premises
    _expect_premise(1, cond, ctx, term.condition, BOOL_TYPE)
    _expect_premise(2, then_premise, ctx, term.then_term, ty)
    _expect_premise(3, else_premise, ctx, term.else_term, ty)


def _check_tabs(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, term, ty = conclusion.ctx, conclusion.term, conclusion.ty
    if not isinstance(term, TmTAbs):
        raise _wrong_term(Rule.TABS, "a type abstraction", conclusion)
    if not isinstance(ty, TyAll):
        raise PremiseError(
            f"A type abstraction needs a universal type, found '{show_type(ty, ctx)}'"
        )
    inner = ctx.add(term.name, TyVarBind())
    _expect_premise(1, premises[0], inner, term.body, ty.body)


def _check_tapp(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, term, ty = conclusion.ctx, conclusion.term, conclusion.ty
    if not isinstance(term, TmTApp):
        raise _wrong_term(Rule.TAPP, "a type application", conclusion)
    premise = premises[0]
    _expect_context(1, premise.ctx, ctx)
    _expect_term(1, premise.term, term.term, ctx)
    if not isinstance(premise.ty, TyAll):
        raise PremiseError(
            f"Premise 1 needs a universal type, found '{show_type(premise.ty, ctx)}'"
        )
    _expect_type("Conclusion", ty, type_subst_top(term.ty, premise.ty.body), ctx)


def _check_let(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, term, ty = conclusion.ctx, conclusion.term, conclusion.ty
    if not isinstance(term, TmLet):
        raise _wrong_term(Rule.LET, "a let binding", conclusion)
    bound_premise, body_premise = premises
    _expect_context(1, bound_premise.ctx, ctx)
    _expect_term(1, bound_premise.term, term.bound, ctx)
    inner = ctx.add(term.name, VarBind(bound_premise.ty))
    _expect_premise(2, body_premise, inner, term.body, type_shift(1, ty))


def _check_const(conclusion: Judgment) -> None:
    if not isinstance(conclusion.term, TmConst):
        raise _wrong_term(Rule.CONST, "true or false", conclusion)
    _expect_type("Constant", conclusion.ty, BOOL_TYPE, conclusion.ctx)


def _check_gen(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, ty = conclusion.ctx, conclusion.ty
    premise = premises[0]
    _expect_context(1, premise.ctx, ctx)
    _expect_term(1, premise.term, conclusion.term, ctx)
    if not isinstance(ty, TyAll):
        raise PremiseError(f"The gen rule needs a universal type, found '{show_type(ty, ctx)}'")
    bound_in_context = ctx.free_type_names()
    body = ty
    while isinstance(body, TyAll):
        if body.name in bound_in_context:
            raise PremiseError(f"{body.name} is free in the context and cannot be generalized")
        if body.name in body.free_vars():
            raise PremiseError(f"{body.name} is already used as a free type name")
        body = degeneralize_top(body)
    _expect_type("Premise 1", premise.ty, body, ctx)


def _check_inst(conclusion: Judgment, premises: Sequence[Judgment]) -> None:
    ctx, ty = conclusion.ctx, conclusion.ty
    premise = premises[0]
    _expect_context(1, premise.ctx, ctx)
    _expect_term(1, premise.term, conclusion.term, ctx)
    if not is_specialized_type(ctx, ty, premise.ty):
        raise PremiseError(
            f"'{show_type(ty, ctx)}' is not an instance of '{show_type(premise.ty, ctx)}'"
        )
