import pytest

from lambdaproof.core.context import EMPTY_CONTEXT
from lambdaproof.core.types import BOOL_TYPE, TyArr, TyName, equal_types
from lambdaproof.parser.parser import parse_context, parse_type
from lambdaproof.typechecker.substitution import Substitution
from lambdaproof.typechecker.unify import (
    OccursCheckError,
    UnificationError,
    are_hm_types_equivalent,
    is_specialized_type,
    unify_type,
)


def test_unify_arrow_with_bool_arrow():
    subst = unify_type(
        TyArr(TyName("A"), TyName("B")), TyArr(BOOL_TYPE, BOOL_TYPE)
    )
    assert set(subst.names()) == {"A", "B"}
    assert subst.apply(TyName("A")) == BOOL_TYPE
    assert subst.apply(TyName("B")) == BOOL_TYPE


@pytest.mark.parametrize(
    "left, right",
    [
        ("A", "Bool"),
        ("A -> Bool", "Bool -> B"),
        ("A -> A", "B -> Bool"),
        ("(A -> B) -> A", "(Bool -> C) -> C"),
        ("A -> B", "B -> A"),
    ],
)
def test_unifier_of_monotypes(left, right):
    t1, t2 = parse_type(left), parse_type(right)
    subst = unify_type(t1, t2)
    assert equal_types(subst.apply(t1), subst.apply(t2))


def test_unify_identical_names():
    assert not unify_type(TyName("A"), TyName("A"))


def test_occurs_check():
    with pytest.raises(OccursCheckError):
        unify_type(parse_type("A"), parse_type("A -> Bool"))


@pytest.mark.parametrize(
    "left, right",
    [
        ("Bool", "Bool -> Bool"),
        ("A -> A", "Bool -> (Bool -> Bool)"),
    ],
)
def test_unification_failure(left, right):
    with pytest.raises(UnificationError):
        unify_type(parse_type(left), parse_type(right))


@pytest.mark.parametrize("left, right", [("X", "A"), ("A", "X")])
def test_rigid_name_binds_the_other_side(left, right):
    subst = unify_type(TyName(left), TyName(right), rigid={"X"})
    assert subst.names() == ["A"]
    assert subst.apply(TyName("A")) == TyName("X")


@pytest.mark.parametrize(
    "left, right",
    [
        ("X", "Bool"),
        ("Bool -> X", "Bool -> Bool"),
        ("X", "Y"),
    ],
)
def test_rigid_name_is_not_instantiated(left, right):
    with pytest.raises(UnificationError):
        unify_type(parse_type(left), parse_type(right), rigid={"X", "Y"})


def test_unify_opens_universal_types():
    subst = unify_type(parse_type("forall X. X -> X"), parse_type("Bool -> Bool"))
    assert subst.apply(TyName("X")) == BOOL_TYPE


def test_bound_variables_unify_by_offset():
    ctx = parse_context("X")
    inner = parse_context("X, y: Bool")
    assert not unify_type(parse_type("X", ctx), parse_type("X", inner))


def test_substitution_applies_oldest_first():
    subst = Substitution.singleton("B", BOOL_TYPE).compose(
        Substitution.singleton("A", TyName("B"))
    )
    assert subst.apply(TyName("A")) == BOOL_TYPE
    assert str(subst) == "{A ↦ B, B ↦ Bool}"
    assert str(Substitution.empty()) == "∅"


def test_substitution_is_applied_under_quantifiers():
    ty = parse_type("forall X. X -> A")
    subst = Substitution.singleton("A", parse_type("Bool -> Bool"))
    assert equal_types(subst.apply(ty), parse_type("forall X. X -> Bool -> Bool"))


@pytest.mark.parametrize(
    "context, special, general, expected",
    [
        ("", "Bool -> Bool", "forall A. A -> A", True),
        ("", "forall B. B -> B", "forall A. A -> A", True),
        ("", "forall A. A -> A", "forall A, B. A -> B", True),
        ("", "Bool -> A", "forall A. A -> A", False),
        ("", "forall A. A -> A", "Bool -> Bool", False),
        ("", "Bool -> Bool", "Bool -> Bool", True),
        ("x: C", "Bool", "C", False),
        ("x: C", "C -> C", "forall A. A -> C", True),
    ],
)
def test_is_specialized_type(context, special, general, expected):
    ctx = parse_context(context)
    assert is_specialized_type(ctx, parse_type(special), parse_type(general)) is expected


def test_hm_equivalence_up_to_renaming():
    assert are_hm_types_equivalent(
        EMPTY_CONTEXT, parse_type("forall A, B. A -> B"), parse_type("forall B, A. B -> A")
    )
    assert not are_hm_types_equivalent(
        EMPTY_CONTEXT, parse_type("forall A. A -> A"), parse_type("forall A, B. A -> B")
    )
