"""
Type inference with Algorithm W, extended with explicit type abstraction and
type application for System F.
"""

import logging
from typing import Optional, Set, Tuple

from lambdaproof.core.context import Context, ContextError, VarBind
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
    term_degeneralize_top,
)
from lambdaproof.core.types import (
    BOOL_TYPE,
    TyAll,
    TyArr,
    TyName,
    Type,
    type_shift,
    type_subst_top,
)
from lambdaproof.errors import SemanticError
from lambdaproof.typechecker.fresh import FreshNameSupply
from lambdaproof.typechecker.generalize import gen, generalize_top, instantiate
from lambdaproof.typechecker.substitution import Substitution
from lambdaproof.typechecker.systems import TypeSystem
from lambdaproof.typechecker.unify import UnificationError, unify_type

logger = logging.getLogger(__name__)

InferenceResult = Tuple[Substitution, Type]


class TypeInferenceError(SemanticError):
    """Exception raised during type inference."""

    def __init__(self, message: str, term: Optional[Term] = None) -> None:
        self.term = term
        super().__init__(message)


def _term_type_names(term: Term) -> Set[str]:
    """Every free type name written inside ``term``."""
    match term:
        case TmAbs(ty=ty, body=body):
            names = _term_type_names(body)
            return names | ty.free_vars() if ty is not None else names
        case TmApp(fn=fn, arg=arg):
            return _term_type_names(fn) | _term_type_names(arg)
        case TmIf(condition=cond, then_term=then_term, else_term=else_term):
            return (
                _term_type_names(cond)
                | _term_type_names(then_term)
                | _term_type_names(else_term)
            )
        case TmTAbs(name=name, body=body):
            return {name} | _term_type_names(body)
        case TmTApp(term=inner, ty=ty):
            return _term_type_names(inner) | ty.free_vars()
        case TmLet(bound=bound, body=body):
            return _term_type_names(bound) | _term_type_names(body)
        case _:
            return set()


class TypeInferrer:
    """Algorithm W over de Bruijn terms.

    One inferrer runs one inference; it owns the supply of fresh type names and
    the names opened by type abstractions, which unification must not bind.
    """

    def __init__(self, system: TypeSystem = TypeSystem.HINDLEY_MILNER) -> None:
        self.system = system
        self.names = FreshNameSupply()
        self.rigid: Set[str] = set()

    def fresh_type_name(self) -> TyName:
        return TyName(self.names.fresh())

    def run(self, ctx: Context, term: Term) -> InferenceResult:
        self.names.reserve(ctx.free_type_names())
        self.names.reserve(_term_type_names(term))
        return self.infer(ctx, term)

    def infer(self, ctx: Context, term: Term) -> InferenceResult:
        logger.debug("W %s", type(term).__name__)
        match term:
            case TmVar():
                return self.infer_var(ctx, term)
            case TmAbs():
                return self.infer_abs(ctx, term)
            case TmApp():
                return self.infer_app(ctx, term)
            case TmLet():
                return self.infer_let(ctx, term)
            case TmIf():
                return self.infer_if(ctx, term)
            case TmTAbs():
                return self.infer_tabs(ctx, term)
            case TmTApp():
                return self.infer_tapp(ctx, term)
            case TmConst():
                return Substitution.empty(), BOOL_TYPE
            case _:
                raise TypeInferenceError(f"Not implemented: {term!r}", term)

    def _unify(self, t1: Type, t2: Type, term: Term) -> Substitution:
        try:
            return unify_type(t1, t2, self.rigid)
        except UnificationError as e:
            raise TypeInferenceError(e.message, term) from e

    def infer_var(self, ctx: Context, term: TmVar) -> InferenceResult:
        try:
            name, binding = ctx.get(term.index)
        except ContextError as e:
            raise TypeInferenceError(f"Unbound variable: {e}", term) from e
        if not isinstance(binding, VarBind):
            raise TypeInferenceError(f"Unbound variable {name}: no type given", term)
        ty = ctx.type_of(term.index)
        if self.system is TypeSystem.SYSTEM_F:
            # explicit polymorphism: instances come from type applications
            return Substitution.empty(), ty
        instance = instantiate(ctx, ty, self.names.used)
        self.names.reserve(instance.free_vars())
        return Substitution.empty(), instance

    def infer_abs(self, ctx: Context, term: TmAbs) -> InferenceResult:
        param = term.ty if term.ty is not None else self.fresh_type_name()
        s1, body_ty = self.infer(ctx.add(term.name, VarBind(param)), term.body)
        # the body type lives under the binder; term binders never occur in it
        return s1, TyArr(s1.apply(param), type_shift(-1, body_ty))

    def infer_app(self, ctx: Context, term: TmApp) -> InferenceResult:
        s1, fn_ty = self.infer(ctx, term.fn)
        s2, arg_ty = self.infer(s1.apply_context(ctx), term.arg)
        result = self.fresh_type_name()
        s3 = self._unify(s2.apply(fn_ty), TyArr(arg_ty, result), term)
        return s3.compose(s2).compose(s1), s3.apply(result)

    def infer_let(self, ctx: Context, term: TmLet) -> InferenceResult:
        s1, bound_ty = self.infer(ctx, term.bound)
        ctx1 = s1.apply_context(ctx)
        if self.system is TypeSystem.HINDLEY_MILNER:
            bound_ty = gen(ctx1, bound_ty)
        s2, body_ty = self.infer(ctx1.add(term.name, VarBind(bound_ty)), term.body)
        return s2.compose(s1), type_shift(-1, body_ty)

    def infer_if(self, ctx: Context, term: TmIf) -> InferenceResult:
        s1, cond_ty = self.infer(ctx, term.condition)
        s2 = self._unify(cond_ty, BOOL_TYPE, term.condition)
        subst = s2.compose(s1)
        s3, then_ty = self.infer(subst.apply_context(ctx), term.then_term)
        subst = s3.compose(subst)
        s4, else_ty = self.infer(subst.apply_context(ctx), term.else_term)
        subst = s4.compose(subst)
        s5 = self._unify(s4.apply(then_ty), else_ty, term)
        return s5.compose(subst), s5.apply(else_ty)

    def infer_tabs(self, ctx: Context, term: TmTAbs) -> InferenceResult:
        name = self.names.fresh_like(term.name)
        self.rigid.add(name)
        s1, body_ty = self.infer(ctx, term_degeneralize_top(name, term.body))
        if name in s1.names():
            raise TypeInferenceError(
                f"Type variable {term.name} cannot be instantiated inside its abstraction",
                term,
            )
        if name in s1.apply_context(ctx).free_type_names():
            raise TypeInferenceError(
                f"Type variable {term.name} escapes into the context", term
            )
        generalized = generalize_top(ctx, s1.apply(body_ty), name)
        # keep the binder name the user wrote
        return s1, TyAll(term.name, generalized.body, info=term.info)

    def infer_tapp(self, ctx: Context, term: TmTApp) -> InferenceResult:
        s1, fn_ty = self.infer(ctx, term.term)
        fn_ty = s1.apply(fn_ty)
        if not isinstance(fn_ty, TyAll):
            raise TypeInferenceError(
                f"Type application expects a universal type, found {fn_ty}", term
            )
        return s1, type_subst_top(s1.apply(term.ty), fn_ty.body)


def w(
    ctx: Context,
    term: Term,
    system: TypeSystem = TypeSystem.HINDLEY_MILNER,
) -> InferenceResult:
    """Run Algorithm W: a substitution and a type for ``term`` in ``ctx``."""
    return TypeInferrer(system).run(ctx, term)


def type_of(
    ctx: Context,
    term: Term,
    system: TypeSystem = TypeSystem.HINDLEY_MILNER,
) -> Type:
    """Principal type of ``term``, generalized in ``ctx``."""
    subst, ty = w(ctx, term, system)
    return gen(subst.apply_context(ctx), subst.apply(ty))
