"""
Generalization and degeneralization: the bridge between Hindley-Milner type
schemes (free names, quantified on demand) and System F types (bound
variables under ∀).
"""

from typing import AbstractSet, List, Optional, Tuple

from lambdaproof.core.context import Context
from lambdaproof.core.types import (
    TyAll,
    TyName,
    Type,
    TyVar,
    type_map,
    type_shift,
)
from lambdaproof.typechecker.fresh import fresh_name


def degeneralize_top(ty: Type, name: Optional[str] = None) -> Type:
    """``∀X. T`` becomes ``T`` with the bound ``X`` replaced by the free name ``X``.

    ``name`` overrides the name used for the replacement.
    """
    if not isinstance(ty, TyAll):
        raise ValueError(f"Cannot degeneralize {ty}: not a universal type")
    replacement = name if name is not None else ty.name

    def on_var(c: int, var: TyVar) -> Type:
        if var.index == c:
            return TyName(replacement, info=var.info)
        return var

    return type_shift(-1, type_map(ty.body, 0, on_var=on_var))


def generalize_top(ctx: Context, ty: Type, name: str) -> Type:
    """Quantify the free name ``name`` of ``ty`` (a type living in ``ctx``)."""
    shifted = type_shift(1, ty)
    inner_len = len(ctx) + 1

    def on_name(c: int, ty_name: TyName) -> Type:
        if ty_name.name == name:
            return TyVar(c, inner_len + c, info=ty_name.info)
        return ty_name

    return TyAll(name, type_map(shifted, 0, on_name=on_name))


def degeneralize_all(ty: Type, taken: AbstractSet[str]) -> Tuple[Type, List[str]]:
    """Strip every top-level ∀, renaming each bound variable to a fresh name.

    Returns the stripped type and the fresh names, outermost first.
    """
    taken = set(taken) | ty.free_vars()
    names = []
    while isinstance(ty, TyAll):
        name = fresh_name(ty.name, taken)
        taken.add(name)
        names.append(name)
        ty = degeneralize_top(ty, name)
    return ty, names


def instantiate(ctx: Context, ty: Type, avoid: AbstractSet[str] = frozenset()) -> Type:
    """Fresh instance of a polymorphic type.

    Bound variables are renamed away from ``avoid``, the free names of ``ctx``
    and the free names of ``ty`` before being degeneralized.
    """
    instance, _ = degeneralize_all(ty, set(avoid) | ctx.free_type_names())
    return instance


def gen(ctx: Context, ty: Type, avoid: AbstractSet[str] = frozenset()) -> Type:
    """Quantify every free name of ``ty`` that is free neither in ``ctx`` nor in ``avoid``.

    Names are quantified in sorted order, the first one outermost.
    """
    names = sorted(ty.free_vars() - ctx.free_type_names() - set(avoid))
    for name in reversed(names):
        ty = generalize_top(ctx, ty, name)
    return ty
