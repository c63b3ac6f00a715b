import pytest

from lambdaproof.errors import TypeSystemError
from lambdaproof.parser.parser import parse_context, parse_term, parse_type
from lambdaproof.typechecker.systems import (
    TypeSystem,
    check_context,
    check_term,
    check_type,
    is_in_system,
)

SIMPLY = TypeSystem.SIMPLY_TYPED
HM = TypeSystem.HINDLEY_MILNER
F = TypeSystem.SYSTEM_F


@pytest.mark.parametrize(
    "text, systems",
    [
        ("Bool -> A", {SIMPLY, HM, F}),
        ("forall A. A -> A", {HM, F}),
        ("forall A, B. A -> B", {HM, F}),
        ("(forall A. A) -> Bool", {F}),
        ("Bool -> forall A. A", {F}),
    ],
)
def test_types(text, systems):
    ty = parse_type(text)
    for system in TypeSystem:
        if system in systems:
            check_type(system, ty)
        else:
            with pytest.raises(TypeSystemError):
                check_type(system, ty)


@pytest.mark.parametrize(
    "text, systems",
    [
        ("\\x: Bool. x", {SIMPLY, HM, F}),
        ("\\x. x", {HM}),
        ("let x = true in x", {HM, F}),
        ("Lambda X. \\x: X. x", {F}),
        ("(\\x: forall A. A. x)", {F}),
        ("if true then false else true", {SIMPLY, HM, F}),
    ],
)
def test_terms(text, systems):
    term = parse_term(text)
    for system in TypeSystem:
        if system in systems:
            check_term(system, term)
        else:
            with pytest.raises(TypeSystemError):
                check_term(system, term)


def test_type_application_is_system_f_only():
    ctx = parse_context("id: forall X. X -> X")
    term = parse_term("id [Bool]", ctx)
    check_term(F, term)
    with pytest.raises(TypeSystemError, match="Hindley-Milner"):
        check_term(HM, term)


def test_type_variable_bindings_are_system_f_only():
    ctx = parse_context("X, x: X")
    check_context(F, ctx)
    with pytest.raises(TypeSystemError):
        check_context(HM, ctx)
    with pytest.raises(TypeSystemError, match="simply typed lambda calculus"):
        check_context(SIMPLY, ctx)


def test_context_types_are_checked():
    with pytest.raises(TypeSystemError):
        check_context(SIMPLY, parse_context("id: forall A. A -> A"))
    check_context(HM, parse_context("id: forall A. A -> A"))


def test_is_in_system():
    ctx = parse_context("f: Bool -> Bool")
    term = parse_term("\\x: Bool. f x", ctx)
    ty = parse_type("Bool -> Bool", ctx)
    assert all(is_in_system(system, ctx, term, ty) for system in TypeSystem)
    assert not is_in_system(SIMPLY, ctx, parse_term("\\x. f x", ctx), ty)


def test_system_values():
    assert TypeSystem("hm") is HM
    assert TypeSystem("simply-typed") is SIMPLY
    assert TypeSystem("system-f") is F
