"""
Conversion of named surface nodes into de Bruijn terms, types and contexts.

Lowercase names must be bound in the context. An uppercase name becomes a
bound type variable when a ∀, a Λ or a type-variable binding of that name is
in scope and a free type name otherwise.
"""

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
from lambdaproof.core.types import TyAll, TyArr, TyBool, TyName, Type, TyVar
from lambdaproof.errors import RepresentationError
from lambdaproof.parser.surface import (
    SAbs,
    SApp,
    SConst,
    SIf,
    SLet,
    SNameBind,
    STAbs,
    STApp,
    STyAll,
    STyArr,
    STyBool,
    STyName,
    STyVarBind,
    SurfaceContext,
    SurfaceTerm,
    SurfaceType,
    SVar,
    SVarBind,
)


def convert_type(ctx: Context, ty: SurfaceType) -> Type:
    match ty:
        case STyName(name=name, info=info):
            index = ctx.index_of(name)
            if index is not None and isinstance(ctx.get(index)[1], TyVarBind):
                return TyVar(index, len(ctx), info=info)
            return TyName(name, info=info)
        case STyBool(info=info):
            return TyBool(info=info)
        case STyArr(param=param, result=result, info=info):
            return TyArr(convert_type(ctx, param), convert_type(ctx, result), info=info)
        case STyAll(name=name, body=body, info=info):
            inner = ctx.add(name, TyVarBind())
            return TyAll(name, convert_type(inner, body), info=info)
        case _:
            raise RepresentationError(f"Unknown surface type: {ty!r}")


def convert_term(ctx: Context, term: SurfaceTerm) -> Term:
    match term:
        case SVar(name=name, info=info):
            index = ctx.index_of(name)
            if index is None:
                raise RepresentationError(f"Unbound variable {name}", info)
            if isinstance(ctx.get(index)[1], TyVarBind):
                raise RepresentationError(
                    f"{name} is a type variable, not a term variable", info
                )
            return TmVar(index, len(ctx), info=info)
        case SConst(value=value, info=info):
            return TmConst(value, info=info)
        case SAbs(name=name, ty=ty, body=body, info=info):
            param = None if ty is None else convert_type(ctx, ty)
            inner = ctx.add_name(name)
            return TmAbs(name, param, convert_term(inner, body), info=info)
        case SApp(fn=fn, arg=arg, info=info):
            return TmApp(convert_term(ctx, fn), convert_term(ctx, arg), info=info)
        case SIf(condition=cond, then_term=then_term, else_term=else_term, info=info):
            return TmIf(
                convert_term(ctx, cond),
                convert_term(ctx, then_term),
                convert_term(ctx, else_term),
                info=info,
            )
        case STAbs(name=name, body=body, info=info):
            inner = ctx.add(name, TyVarBind())
            return TmTAbs(name, convert_term(inner, body), info=info)
        case STApp(term=inner_term, ty=ty, info=info):
            return TmTApp(
                convert_term(ctx, inner_term), convert_type(ctx, ty), info=info
            )
        case SLet(name=name, bound=bound, body=body, info=info):
            inner = ctx.add_name(name)
            return TmLet(
                name, convert_term(ctx, bound), convert_term(inner, body), info=info
            )
        case _:
            raise RepresentationError(f"Unknown surface term: {term!r}")


def convert_context(bindings: SurfaceContext) -> Context:
    """Build a context from bindings listed oldest first."""
    ctx = Context()
    for binding in bindings:
        match binding:
            case SNameBind(name=name):
                ctx = ctx.add_name(name)
            case SVarBind(name=name, ty=ty):
                ctx = ctx.add(name, VarBind(convert_type(ctx, ty)))
            case STyVarBind(name=name):
                ctx = ctx.add(name, TyVarBind())
            case _:
                raise RepresentationError(f"Unknown surface binding: {binding!r}")
    return ctx
