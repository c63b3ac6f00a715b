"""
Pretty printer for types, terms and contexts. The output uses the canonical
glyphs and parses back to an equal value.
"""

from typing import List, Optional

from lambdaproof.core.context import Context, NameBind, TyVarBind, VarBind
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


def _pick_fresh(name: str, names: List[str], taken: set) -> str:
    candidate = name
    counter = 1
    while candidate in names or candidate in taken:
        candidate = f"{name}{counter}"
        counter += 1
    return candidate


def _lookup(names: List[str], index: int) -> str:
    if 0 <= index < len(names):
        return names[index]
    return f"?{index}"


def _show_type(ty: Type, names: List[str]) -> str:
    match ty:
        case TyName(name=name):
            return name
        case TyVar(index=index):
            return _lookup(names, index)
        case TyBool():
            return "Bool"
        case TyArr(param=param, result=result):
            left = _show_type(param, names)
            if isinstance(param, (TyArr, TyAll)):
                left = f"({left})"
            return f"{left} → {_show_type(result, names)}"
        case TyAll(name=name, body=body):
            fresh = _pick_fresh(name, names, body.free_vars())
            return f"∀{fresh}. {_show_type(body, [fresh] + names)}"
        case _:
            raise TypeError(f"Unknown type: {ty!r}")


def show_type(ty: Type, ctx: Optional[Context] = None) -> str:
    return _show_type(ty, ctx.names() if ctx is not None else [])


def _is_atom(term: Term) -> bool:
    return isinstance(term, (TmVar, TmConst))


def _show_term(term: Term, names: List[str]) -> str:
    match term:
        case TmVar(index=index):
            return _lookup(names, index)
        case TmConst(value=value):
            return "true" if value else "false"
        case TmAbs(name=name, ty=ty, body=body):
            fresh = _pick_fresh(name, names, set())
            body_str = _show_term(body, [fresh] + names)
            if ty is None:
                return f"λ{fresh}. {body_str}"
            return f"λ{fresh}:{_show_type(ty, names)}. {body_str}"
        case TmTAbs(name=name, body=body):
            fresh = _pick_fresh(name, names, set())
            return f"Λ{fresh}. {_show_term(body, [fresh] + names)}"
        case TmLet(name=name, bound=bound, body=body):
            fresh = _pick_fresh(name, names, set())
            bound_str = _show_term(bound, names)
            return f"let {fresh} = {bound_str} in {_show_term(body, [fresh] + names)}"
        case TmIf(condition=cond, then_term=then_term, else_term=else_term):
            return (
                f"if {_show_term(cond, names)} "
                f"then {_show_term(then_term, names)} "
                f"else {_show_term(else_term, names)}"
            )
        case TmApp(fn=fn, arg=arg):
            fn_str = _show_term(fn, names)
            if not isinstance(fn, (TmApp, TmTApp)) and not _is_atom(fn):
                fn_str = f"({fn_str})"
            arg_str = _show_term(arg, names)
            if not _is_atom(arg):
                arg_str = f"({arg_str})"
            return f"{fn_str} {arg_str}"
        case TmTApp(term=inner, ty=ty):
            inner_str = _show_term(inner, names)
            if not isinstance(inner, (TmApp, TmTApp)) and not _is_atom(inner):
                inner_str = f"({inner_str})"
            return f"{inner_str} [{_show_type(ty, names)}]"
        case _:
            raise TypeError(f"Unknown term: {term!r}")


def show_term(term: Term, ctx: Optional[Context] = None) -> str:
    return _show_term(term, ctx.names() if ctx is not None else [])


def show_context(ctx: Context) -> str:
    """Render a context oldest binding first, e.g. ``X, x: X, y``."""
    parts = []
    entries = list(ctx)
    for position, (name, binding) in enumerate(entries):
        tail = entries[position + 1 :]
        match binding:
            case VarBind(ty=ty):
                parts.append(f"{name}: {_show_type(ty, [n for n, _ in tail])}")
            case NameBind() | TyVarBind():
                parts.append(name)
    return ", ".join(reversed(parts))
