import pytest

from lambdaproof.core.context import EMPTY_CONTEXT
from lambdaproof.core.terms import TmConst, TmVar, term_shift, term_subst_top
from lambdaproof.core.types import (
    BOOL_TYPE,
    TyArr,
    TyName,
    TyVar,
    equal_types,
    type_shift,
    type_subst_top,
)
from lambdaproof.parser.parser import parse_context, parse_term, parse_type
from lambdaproof.typechecker.generalize import (
    degeneralize_all,
    degeneralize_top,
    gen,
    generalize_top,
    instantiate,
)

CONTEXT = "X, f: X -> Bool, Y"

TYPES = [
    "Bool",
    "X -> Y",
    "forall Z. Z -> X",
    "(forall Z. Z -> Z) -> Y -> A",
]

TERMS = [
    "f",
    "\\x: X. f x",
    "Lambda Z. \\z: Z. f",
    "let g = f in \\y: Y. g",
]


@pytest.mark.parametrize("text", TYPES)
def test_type_shift_by_zero_is_identity(text):
    ty = parse_type(text, parse_context(CONTEXT))
    assert type_shift(0, ty) == ty


@pytest.mark.parametrize("text", TYPES)
def test_type_shifts_compose(text):
    ty = parse_type(text, parse_context(CONTEXT))
    assert type_shift(2, type_shift(3, ty)) == type_shift(5, ty)
    assert type_shift(-1, type_shift(1, ty)) == ty


@pytest.mark.parametrize("text", TERMS)
def test_term_shift_by_zero_is_identity(text):
    term = parse_term(text, parse_context(CONTEXT))
    assert term_shift(0, term) == term


@pytest.mark.parametrize("text", TERMS)
def test_term_shifts_compose(text):
    term = parse_term(text, parse_context(CONTEXT))
    assert term_shift(1, term_shift(1, term)) == term_shift(2, term)


def test_shift_keeps_variables_pointing_at_their_binder():
    shifted = type_shift(1, TyVar(0, 1))
    assert shifted == TyVar(1, 2)
    assert shifted.offset == TyVar(0, 1).offset


def test_type_subst_top():
    body = parse_type("X -> Y", parse_context("Y, X"))
    assert type_subst_top(BOOL_TYPE, body) == TyArr(BOOL_TYPE, TyVar(0, 1))


def test_type_subst_top_under_binder():
    body = parse_type("forall Z. Z -> X", parse_context("X"))
    result = type_subst_top(TyName("A"), body)
    assert equal_types(result, parse_type("forall Z. Z -> A"))


def test_term_subst_top():
    assert term_subst_top(TmConst(True), TmVar(0, 1)) == TmConst(True)
    assert term_subst_top(TmConst(True), TmVar(1, 2)) == TmVar(0, 1)


def test_degeneralize_then_generalize_is_identity():
    ty = parse_type("forall A. A -> B")
    opened = degeneralize_top(ty)
    assert opened == TyArr(TyName("A"), TyName("B"))
    assert equal_types(generalize_top(EMPTY_CONTEXT, opened, "A"), ty)


@pytest.mark.parametrize(
    "context, text, generalized",
    [
        ("", "A -> B", "forall A. A -> B"),
        ("X", "X -> A", "forall A. X -> A"),
        ("X, x: X", "A -> X", "forall A. A -> X"),
        ("", "forall Z. Z -> A", "forall A, Z. Z -> A"),
        ("X", "forall Z. Z -> A", "forall A, Z. Z -> A"),
        ("X", "forall Z. Z -> X -> A", "forall A, Z. Z -> X -> A"),
    ],
)
def test_generalize_and_degeneralize_are_inverse(context, text, generalized):
    ctx = parse_context(context)
    ty = parse_type(text, ctx)
    expected = parse_type(generalized, ctx)
    assert generalize_top(ctx, ty, "A") == expected
    assert degeneralize_top(generalize_top(ctx, ty, "A")) == ty
    assert generalize_top(ctx, degeneralize_top(expected), "A") == expected


def test_degeneralize_with_other_name():
    ty = parse_type("forall A. A -> A")
    assert degeneralize_top(ty, "C") == TyArr(TyName("C"), TyName("C"))


def test_degeneralize_requires_forall():
    with pytest.raises(ValueError):
        degeneralize_top(BOOL_TYPE)


def test_degeneralize_all_renames_taken_names():
    ty, names = degeneralize_all(parse_type("forall A, B. A -> B -> C"), {"A"})
    assert names == ["A1", "B"]
    assert ty == parse_type("A1 -> B -> C")


def test_instantiate_avoids_context_names():
    ctx = parse_context("x: A")
    ty = instantiate(ctx, parse_type("forall A. A -> A"))
    assert ty == parse_type("A1 -> A1")


def test_gen_quantifies_in_sorted_order():
    ty = gen(EMPTY_CONTEXT, parse_type("B -> A"))
    assert str(ty) == "∀A. ∀B. B → A"
    assert equal_types(ty, parse_type("forall A, B. B -> A"))


def test_gen_leaves_context_names_free():
    ctx = parse_context("x: A")
    assert str(gen(ctx, parse_type("A -> B"))) == "∀B. A → B"


def test_equal_types_ignores_binder_names():
    assert equal_types(parse_type("forall X. X -> X"), parse_type("forall Y. Y -> Y"))
    assert not equal_types(
        parse_type("forall X, Y. X -> Y"), parse_type("forall X, Y. Y -> X")
    )
