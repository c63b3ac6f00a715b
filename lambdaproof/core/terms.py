"""
Term representation. Term variables and type variables share one context, so
every term binder (λ, Λ, let) raises the cutoff for the types it contains too.
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import Callable, Optional

from lambdaproof.core.info import Info
from lambdaproof.core.types import (
    Type,
    TyName,
    TyVar,
    equal_types,
    type_map,
    type_shift_above,
)


class Term(ABC):
    def __str__(self) -> str:
        from lambdaproof.core.printer import show_term

        return show_term(self)


@dataclass(frozen=True)
class TmVar(Term):
    index: int
    ctx_len: int
    info: Optional[Info] = field(default=None, compare=False, repr=False)

    @property
    def offset(self) -> int:
        return self.ctx_len - self.index


@dataclass(frozen=True)
class TmAbs(Term):
    name: str
    ty: Optional[Type]
    body: Term
    info: Optional[Info] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TmApp(Term):
    fn: Term
    arg: Term
    info: Optional[Info] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TmIf(Term):
    condition: Term
    then_term: Term
    else_term: Term
    info: Optional[Info] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TmTAbs(Term):
    name: str
    body: Term
    info: Optional[Info] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TmTApp(Term):
    term: Term
    ty: Type
    info: Optional[Info] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TmLet(Term):
    name: str
    bound: Term
    body: Term
    info: Optional[Info] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TmConst(Term):
    value: bool
    info: Optional[Info] = field(default=None, compare=False, repr=False)


TermVarCallback = Callable[[int, TmVar], Term]
TypeCallback = Callable[[int, Type], Type]


def term_map(
    term: Term,
    cutoff: int,
    on_var: TermVarCallback,
    on_type: TypeCallback,
) -> Term:
    def walk(c: int, t: Term) -> Term:
        match t:
            case TmVar():
                return on_var(c, t)
            case TmAbs(name=name, ty=ty, body=body):
                new_ty = None if ty is None else on_type(c, ty)
                return TmAbs(name, new_ty, walk(c + 1, body), info=t.info)
            case TmApp(fn=fn, arg=arg):
                return TmApp(walk(c, fn), walk(c, arg), info=t.info)
            case TmIf(condition=cond, then_term=then_term, else_term=else_term):
                return TmIf(
                    walk(c, cond),
                    walk(c, then_term),
                    walk(c, else_term),
                    info=t.info,
                )
            case TmTAbs(name=name, body=body):
                return TmTAbs(name, walk(c + 1, body), info=t.info)
            case TmTApp(term=inner, ty=ty):
                return TmTApp(walk(c, inner), on_type(c, ty), info=t.info)
            case TmLet(name=name, bound=bound, body=body):
                return TmLet(name, walk(c, bound), walk(c + 1, body), info=t.info)
            case TmConst():
                return t
            case _:
                raise TypeError(f"Unknown term: {t!r}")

    return walk(cutoff, term)


def term_shift_above(d: int, cutoff: int, term: Term) -> Term:
    def on_var(c: int, var: TmVar) -> Term:
        index = var.index + d if var.index >= c else var.index
        return TmVar(index, var.ctx_len + d, info=var.info)

    def on_type(c: int, ty: Type) -> Type:
        return type_shift_above(d, c, ty)

    return term_map(term, cutoff, on_var, on_type)


def term_shift(d: int, term: Term) -> Term:
    return term_shift_above(d, 0, term)


def term_subst(j: int, s: Term, term: Term) -> Term:
    def on_var(c: int, var: TmVar) -> Term:
        if var.index == c:
            return term_shift(c, s)
        return var

    return term_map(term, j, on_var, lambda c, ty: ty)


def term_subst_top(s: Term, term: Term) -> Term:
    return term_shift(-1, term_subst(0, term_shift(1, s), term))


def term_degeneralize_top(name: str, term: Term) -> Term:
    """Turn the body of ``ΛX. body`` into a term of the enclosing context.

    Every use of the type variable bound by the removed binder becomes the
    free name ``name``; everything else is shifted down one level.
    """

    def on_type(c: int, ty: Type) -> Type:
        def on_ty_var(depth: int, var: TyVar) -> Type:
            if var.index == depth:
                return TyName(name, info=var.info)
            return var

        return type_map(ty, c, on_var=on_ty_var)

    replaced = term_map(term, 0, lambda c, var: var, on_type)
    return term_shift(-1, replaced)


def equal_terms(t1: Term, t2: Term) -> bool:
    """Structural equality up to binder names and source positions."""

    def walk(depth: int, a: Term, b: Term) -> bool:
        match (a, b):
            case (TmVar(index=i1), TmVar(index=i2)):
                if i1 < depth or i2 < depth:
                    return i1 == i2
                return a.offset == b.offset
            case (TmAbs(ty=ty1, body=body1), TmAbs(ty=ty2, body=body2)):
                if (ty1 is None) != (ty2 is None):
                    return False
                if ty1 is not None and not equal_types(ty1, ty2, depth):
                    return False
                return walk(depth + 1, body1, body2)
            case (TmApp(fn=f1, arg=a1), TmApp(fn=f2, arg=a2)):
                return walk(depth, f1, f2) and walk(depth, a1, a2)
            case (TmIf(), TmIf()):
                return (
                    walk(depth, a.condition, b.condition)
                    and walk(depth, a.then_term, b.then_term)
                    and walk(depth, a.else_term, b.else_term)
                )
            case (TmTAbs(body=body1), TmTAbs(body=body2)):
                return walk(depth + 1, body1, body2)
            case (TmTApp(term=inner1, ty=ty1), TmTApp(term=inner2, ty=ty2)):
                return walk(depth, inner1, inner2) and equal_types(ty1, ty2, depth)
            case (TmLet(bound=bound1, body=body1), TmLet(bound=bound2, body=body2)):
                return walk(depth, bound1, bound2) and walk(depth + 1, body1, body2)
            case (TmConst(value=v1), TmConst(value=v2)):
                return v1 == v2
            case _:
                return False

    return walk(0, t1, t2)
