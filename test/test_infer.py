import pytest

from lambdaproof.core.context import EMPTY_CONTEXT
from lambdaproof.core.terms import TmConst
from lambdaproof.core.types import BOOL_TYPE, TyArr, equal_types
from lambdaproof.parser.parser import parse_context, parse_term, parse_type
from lambdaproof.typechecker.infer import TypeInferenceError, type_of, w
from lambdaproof.typechecker.systems import TypeSystem


def infer(context: str, term: str, system: TypeSystem = TypeSystem.HINDLEY_MILNER):
    ctx = parse_context(context)
    return type_of(ctx, parse_term(term, ctx), system)


def test_constant():
    assert type_of(EMPTY_CONTEXT, TmConst(True)) == BOOL_TYPE


def test_identity_is_generalized():
    ty = infer("", "\\x. x")
    assert equal_types(ty, parse_type("forall X. X -> X"))
    assert str(ty) == "∀A. A → A"


@pytest.mark.parametrize(
    "context, term, expected",
    [
        ("", "\\x. \\y. x", "forall A, B. A -> B -> A"),
        ("f: Bool -> Bool", "f true", "Bool"),
        ("", "\\f. f true", "forall B. (Bool -> B) -> B"),
        ("", "\\x: Bool. if x then false else true", "Bool -> Bool"),
        ("", "let id = \\x. x in if id true then id false else true", "Bool"),
        ("", "let id = \\x. x in id", "forall A. A -> A"),
        ("y: A", "\\x. y", "forall B. B -> A"),
    ],
)
def test_hindley_milner(context, term, expected):
    assert equal_types(infer(context, term), parse_type(expected))


def test_w_returns_substitution():
    ctx = parse_context("")
    subst, ty = w(ctx, parse_term("\\f. f true", ctx))
    assert "A" in subst.names()
    assert equal_types(subst.apply(ty), parse_type("(Bool -> B) -> B"))


@pytest.mark.parametrize(
    "term",
    [
        "\\x. x x",
        "if true then true else \\x: Bool. x",
        "if \\x: Bool. x then true else false",
        "true true",
    ],
)
def test_ill_typed(term):
    with pytest.raises(TypeInferenceError):
        infer("", term)


def test_lambda_bound_variables_are_monomorphic():
    with pytest.raises(TypeInferenceError):
        infer("", "\\f. if f true then f (\\x: Bool. x) else true")


@pytest.mark.parametrize(
    "context, term, expected",
    [
        ("", "Lambda X. \\x: X. x", "forall X. X -> X"),
        ("id: forall X. X -> X", "id [Bool]", "Bool -> Bool"),
        ("", "(Lambda X. \\x: X. x) [Bool] true", "Bool"),
        ("", "Lambda X. Lambda Y. \\x: X. \\y: Y. y", "forall X, Y. X -> Y -> Y"),
        ("", "Lambda X. \\f: X -> X. \\x: X. f x", "forall X. (X -> X) -> X -> X"),
        ("", "Lambda X. \\x: X. (\\y: X. y) x", "forall X. X -> X"),
        ("g: Bool -> Bool", "Lambda X. \\x: X. g true", "forall X. X -> Bool"),
    ],
)
def test_system_f(context, term, expected):
    ty = infer(context, term, TypeSystem.SYSTEM_F)
    assert equal_types(ty, parse_type(expected))


def test_type_abstraction_keeps_binder_name():
    assert str(infer("", "Lambda X. \\x: X. x", TypeSystem.SYSTEM_F)) == "∀X. X → X"


def test_type_application_needs_universal_type():
    with pytest.raises(TypeInferenceError, match="universal type"):
        infer("", "true [Bool]", TypeSystem.SYSTEM_F)


def test_type_abstraction_must_stay_generic():
    with pytest.raises(TypeInferenceError):
        infer("", "Lambda X. \\x: X. if x then x else x", TypeSystem.SYSTEM_F)


def test_type_variable_must_not_escape_into_context():
    with pytest.raises(TypeInferenceError, match="escapes"):
        infer("f: A -> Bool", "Lambda X. \\x: X. f x", TypeSystem.SYSTEM_F)


def test_simply_typed():
    ty = infer("f: Bool -> Bool", "\\x: Bool. f (f x)", TypeSystem.SIMPLY_TYPED)
    assert ty == TyArr(BOOL_TYPE, BOOL_TYPE)
