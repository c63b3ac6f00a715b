"""
The three type systems share one representation and differ in which forms
are legal. Membership is decided structurally; the system is always passed
explicitly.
"""

from enum import Enum

from lambdaproof.core.context import Context, TyVarBind, VarBind
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
)
from lambdaproof.core.types import TyAll, TyArr, TyVar, Type, is_monotype
from lambdaproof.errors import TypeSystemError


class TypeSystem(str, Enum):
    SIMPLY_TYPED = "simply-typed"
    HINDLEY_MILNER = "hm"
    SYSTEM_F = "system-f"

    @property
    def display_name(self) -> str:
        match self:
            case TypeSystem.SIMPLY_TYPED:
                return "simply typed lambda calculus"
            case TypeSystem.HINDLEY_MILNER:
                return "Hindley-Milner"
            case TypeSystem.SYSTEM_F:
                return "System F"


def _not_in(system: TypeSystem, what: str) -> TypeSystemError:
    return TypeSystemError(f"{what} is not part of {system.display_name}")


def check_type(system: TypeSystem, ty: Type) -> None:
    """Raise TypeSystemError if ``ty`` is not a type of ``system``."""
    match system:
        case TypeSystem.SIMPLY_TYPED:
            _check_simple_type(system, ty)
        case TypeSystem.HINDLEY_MILNER:
            # type schemes: quantifiers only in prenex position
            depth = 0
            while isinstance(ty, TyAll):
                ty = ty.body
                depth += 1
            if not is_monotype(ty):
                raise _not_in(system, "A nested universal quantifier")
            _check_bound_vars(system, ty, depth)
        case TypeSystem.SYSTEM_F:
            pass


def _check_simple_type(system: TypeSystem, ty: Type) -> None:
    match ty:
        case TyAll():
            raise _not_in(system, "A universal quantifier")
        case TyVar():
            raise _not_in(system, "A bound type variable")
        case TyArr(param=param, result=result):
            _check_simple_type(system, param)
            _check_simple_type(system, result)


def _check_bound_vars(system: TypeSystem, ty: Type, depth: int) -> None:
    """Bound variables must point at one of the ``depth`` prenex quantifiers."""
    match ty:
        case TyVar(index=index) if index >= depth:
            raise _not_in(system, "A type variable bound in the context")
        case TyArr(param=param, result=result):
            _check_bound_vars(system, param, depth)
            _check_bound_vars(system, result, depth)


def check_term(system: TypeSystem, term: Term) -> None:
    """Raise TypeSystemError if ``term`` uses a form ``system`` excludes."""
    match term:
        case TmVar() | TmConst():
            pass
        case TmAbs(ty=ty, body=body):
            if ty is None and system is not TypeSystem.HINDLEY_MILNER:
                raise _not_in(system, "An abstraction without type annotation")
            if ty is not None:
                if system is TypeSystem.HINDLEY_MILNER and not is_monotype(ty):
                    raise _not_in(system, "A polymorphic annotation")
                check_type(system, ty)
            check_term(system, body)
        case TmApp(fn=fn, arg=arg):
            check_term(system, fn)
            check_term(system, arg)
        case TmIf(condition=cond, then_term=then_term, else_term=else_term):
            check_term(system, cond)
            check_term(system, then_term)
            check_term(system, else_term)
        case TmTAbs(body=body):
            if system is not TypeSystem.SYSTEM_F:
                raise _not_in(system, "A type abstraction")
            check_term(system, body)
        case TmTApp(term=inner, ty=ty):
            if system is not TypeSystem.SYSTEM_F:
                raise _not_in(system, "A type application")
            check_term(system, inner)
        case TmLet(bound=bound, body=body):
            if system is TypeSystem.SIMPLY_TYPED:
                raise _not_in(system, "A let binding")
            check_term(system, bound)
            check_term(system, body)
        case _:
            raise TypeError(f"Unknown term: {term!r}")


def check_context(system: TypeSystem, ctx: Context) -> None:
    for name, binding in ctx:
        match binding:
            case TyVarBind() if system is not TypeSystem.SYSTEM_F:
                raise _not_in(system, f"The type variable binding {name}")
            case VarBind(ty=ty):
                check_type(system, ty)


def is_in_system(system: TypeSystem, ctx: Context, term: Term, ty: Type) -> bool:
    try:
        check_context(system, ctx)
        check_term(system, term)
        check_type(system, ty)
    except TypeSystemError:
        return False
    return True
