import logging
from typing import AbstractSet

from lambdaproof.core.context import Context
from lambdaproof.core.types import (
    TyAll,
    TyArr,
    TyBool,
    TyName,
    Type,
    TyVar,
    occurs_in,
)
from lambdaproof.errors import SemanticError
from lambdaproof.typechecker.fresh import fresh_name
from lambdaproof.typechecker.generalize import degeneralize_all, degeneralize_top
from lambdaproof.typechecker.substitution import Substitution

logger = logging.getLogger(__name__)


class UnificationError(SemanticError):
    pass


class OccursCheckError(UnificationError):
    pass


def _bind(name: str, ty: Type) -> Substitution:
    if occurs_in(name, ty):
        raise OccursCheckError(f"Occurs check failed: {name} occurs in {ty}")
    return Substitution.singleton(name, ty)


def _open_forall(ty: TyAll, other: Type) -> Type:
    name = fresh_name(ty.name, ty.free_vars() | other.free_vars())
    return degeneralize_top(ty, name)


def unify_type(
    t1: Type, t2: Type, rigid: AbstractSet[str] = frozenset()
) -> Substitution:
    """Unify two types and return the most general unifier.

    Free type names act as unification variables, except the names in
    ``rigid``, which only unify with themselves or with a flexible name. A
    universal type on either side is degeneralized with a fresh name
    first.
    """
    logger.debug("unify %s ~ %s", t1, t2)
    match (t1, t2):
        case (TyName(name=name1), TyName(name=name2)):
            if name1 == name2:
                return Substitution.empty()
            if name1 not in rigid:
                return Substitution.singleton(name1, t2)
            if name2 not in rigid:
                return Substitution.singleton(name2, t1)
            raise UnificationError(
                f"Cannot unify rigid type variables {name1} and {name2}"
            )
        case (TyName(name=name), _) if name not in rigid:
            return _bind(name, t2)
        case (_, TyName(name=name)) if name not in rigid:
            return _bind(name, t1)
        case (TyBool(), TyBool()):
            return Substitution.empty()
        case (TyArr(param=param1, result=result1), TyArr(param=param2, result=result2)):
            s1 = unify_type(param1, param2, rigid)
            s2 = unify_type(s1.apply(result1), s1.apply(result2), rigid)
            return s2.compose(s1)
        case (TyAll(), _):
            return unify_type(_open_forall(t1, t2), t2, rigid)
        case (_, TyAll()):
            return unify_type(t1, _open_forall(t2, t1), rigid)
        case (TyVar(), TyVar()) if t1.offset == t2.offset:
            return Substitution.empty()
        case _:
            raise UnificationError(f"Cannot unify {t1} and {t2}")


def is_specialized_type(ctx: Context, ty_spec: Type, ty_gen: Type) -> bool:
    """Decide whether ``ty_spec`` is an instance of the generic type ``ty_gen``.

    Only the top-level quantified variables of ``ty_gen`` may be instantiated;
    the quantified variables of ``ty_spec`` are renamed apart and stay rigid.
    """
    taken = ctx.free_type_names() | ty_spec.free_vars() | ty_gen.free_vars()
    gen_body, gen_names = degeneralize_all(ty_gen, taken)
    spec_body, _ = degeneralize_all(ty_spec, taken | set(gen_names))
    try:
        subst = unify_type(gen_body, spec_body)
    except UnificationError as e:
        logger.debug("%s is not an instance of %s: %s", ty_spec, ty_gen, e)
        return False
    gen_free = gen_body.free_vars()
    return all(name in gen_free and name in gen_names for name in subst.names())


def are_hm_types_equivalent(ctx: Context, ty1: Type, ty2: Type) -> bool:
    """Equality up to renaming and reordering of the top-level quantifiers."""
    count1 = len(degeneralize_all(ty1, set())[1])
    count2 = len(degeneralize_all(ty2, set())[1])
    return (
        count1 == count2
        and is_specialized_type(ctx, ty1, ty2)
        and is_specialized_type(ctx, ty2, ty1)
    )
