"""
Type representation shared by the simply-typed, Hindley-Milner and System F checkers.

Bound type variables are de Bruijn indices. Every variable also records the
length of the context it was created in, so ``ctx_len - index - 1`` is the
offset of its binder from the root of the context. Two variables living in
differently sized contexts can be compared through that offset.

Free type names (``TyName``) are never bound by a quantifier: they are the
unification variables of Hindley-Milner inference and the base types of the
simply-typed calculus.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional, Set

from lambdaproof.core.info import Info


class Type(ABC):
    """Base class for all types"""

    @abstractmethod
    def free_vars(self) -> Set[str]:
        """Return the set of free type names in this type"""
        pass

    def __str__(self) -> str:
        from lambdaproof.core.printer import show_type

        return show_type(self)


@dataclass(frozen=True)
class TyName(Type):
    """Free type name (e.g. 'A', 'T1')"""

    name: str
    info: Optional[Info] = field(default=None, compare=False, repr=False)

    def free_vars(self) -> Set[str]:
        return {self.name}


@dataclass(frozen=True)
class TyVar(Type):
    """Bound type variable"""

    index: int
    ctx_len: int
    info: Optional[Info] = field(default=None, compare=False, repr=False)

    def free_vars(self) -> Set[str]:
        return set()

    @property
    def offset(self) -> int:
        return self.ctx_len - self.index


@dataclass(frozen=True)
class TyArr(Type):
    """Function type (e.g. A → Bool)"""

    param: Type
    result: Type
    info: Optional[Info] = field(default=None, compare=False, repr=False)

    def free_vars(self) -> Set[str]:
        return self.param.free_vars() | self.result.free_vars()


@dataclass(frozen=True)
class TyAll(Type):
    """Universal quantification. The name is only kept for display."""

    name: str
    body: Type
    info: Optional[Info] = field(default=None, compare=False, repr=False)

    def free_vars(self) -> Set[str]:
        return self.body.free_vars()


@dataclass(frozen=True)
class TyBool(Type):
    info: Optional[Info] = field(default=None, compare=False, repr=False)

    def free_vars(self) -> Set[str]:
        return set()


BOOL_TYPE = TyBool()

VarCallback = Callable[[int, TyVar], Type]
NameCallback = Callable[[int, TyName], Type]


def type_map(
    ty: Type,
    cutoff: int,
    on_var: Optional[VarCallback] = None,
    on_name: Optional[NameCallback] = None,
) -> Type:
    """Rebuild ``ty`` bottom-up, calling ``on_var``/``on_name`` on every leaf.

    The callbacks receive the current cutoff, which starts at ``cutoff`` and
    grows by one under every quantifier.
    """

    def walk(c: int, t: Type) -> Type:
        match t:
            case TyVar():
                return on_var(c, t) if on_var is not None else t
            case TyName():
                return on_name(c, t) if on_name is not None else t
            case TyArr(param=param, result=result):
                return TyArr(walk(c, param), walk(c, result), info=t.info)
            case TyAll(name=name, body=body):
                return TyAll(name, walk(c + 1, body), info=t.info)
            case TyBool():
                return t
            case _:
                raise TypeError(f"Unknown type: {t!r}")

    return walk(cutoff, ty)


def type_shift_above(d: int, cutoff: int, ty: Type) -> Type:
    def on_var(c: int, var: TyVar) -> Type:
        index = var.index + d if var.index >= c else var.index
        return TyVar(index, var.ctx_len + d, info=var.info)

    return type_map(ty, cutoff, on_var=on_var)


def type_shift(d: int, ty: Type) -> Type:
    return type_shift_above(d, 0, ty)


def type_subst(j: int, s: Type, ty: Type) -> Type:
    """Replace the variable with index ``j`` by ``s``, re-based under binders."""

    def on_var(c: int, var: TyVar) -> Type:
        if var.index == c:
            return type_shift(c, s)
        return var

    return type_map(ty, j, on_var=on_var)


def type_subst_top(s: Type, ty: Type) -> Type:
    return type_shift(-1, type_subst(0, type_shift(1, s), ty))


def ftv(ty: Type) -> Set[str]:
    return ty.free_vars()


def substitute_name(name: str, replacement: Type, ty: Type) -> Type:
    """Replace every occurrence of the free name ``name`` by ``replacement``.

    ``replacement`` lives in the context of ``ty``, so each copy is shifted by
    the number of quantifiers it ends up under.
    """

    def on_name(c: int, ty_name: TyName) -> Type:
        if ty_name.name == name:
            return type_shift(c, replacement)
        return ty_name

    return type_map(ty, 0, on_name=on_name)


def occurs_in(name: str, ty: Type) -> bool:
    """Check if a free type name occurs within a type (prevents infinite types)"""
    return name in ty.free_vars()


def equal_types(ty1: Type, ty2: Type, depth: int = 0) -> bool:
    """Structural equality up to quantifier names and source positions.

    Variables bound inside the types are compared by index. Variables pointing
    into the context are compared by offset, so types resolved in contexts of
    different length still compare equal when they point at the same binder.
    """

    def walk(depth: int, t1: Type, t2: Type) -> bool:
        match (t1, t2):
            case (TyName(name=name1), TyName(name=name2)):
                return name1 == name2
            case (TyVar(index=i1), TyVar(index=i2)):
                if i1 < depth or i2 < depth:
                    return i1 == i2
                return t1.offset == t2.offset
            case (TyArr(param=p1, result=r1), TyArr(param=p2, result=r2)):
                return walk(depth, p1, p2) and walk(depth, r1, r2)
            case (TyAll(body=body1), TyAll(body=body2)):
                return walk(depth + 1, body1, body2)
            case (TyBool(), TyBool()):
                return True
            case _:
                return False

    return walk(depth, ty1, ty2)


def is_monotype(ty: Type) -> bool:
    match ty:
        case TyAll():
            return False
        case TyArr(param=param, result=result):
            return is_monotype(param) and is_monotype(result)
        case _:
            return True
