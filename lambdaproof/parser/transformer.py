"""
AST Transformer for converting Lark parse trees to named surface nodes.
"""

from typing import Any, List, Optional

from lark import Token, Transformer, Tree, v_args
from lark.tree import Meta

from lambdaproof.core.info import Info
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
    SurfaceBinding,
    SurfaceNode,
    SVar,
    SVarBind,
)


def _info(meta: Meta) -> Optional[Info]:
    if getattr(meta, "empty", True):
        return None
    return Info(meta.line, meta.column)


def _token_info(token: Token) -> Optional[Info]:
    if token.line is None or token.column is None:
        return None
    return Info(token.line, token.column)


@v_args(meta=True)
class SurfaceTransformer(Transformer):
    """Transformer that converts Lark parse trees to surface nodes."""

    # Entry points
    def start_term(self, meta: Meta, items: List[Any]) -> SurfaceNode:
        return items[0]

    def start_type(self, meta: Meta, items: List[Any]) -> SurfaceNode:
        return items[0]

    def start_context(self, meta: Meta, items: List[Any]) -> List[SurfaceBinding]:
        return list(items)

    # Terms
    def var(self, meta: Meta, items: List[Any]) -> SVar:
        token = items[0]
        return SVar(token.value, _token_info(token))

    def true(self, meta: Meta, items: List[Any]) -> SConst:
        return SConst(True, _info(meta))

    def false(self, meta: Meta, items: List[Any]) -> SConst:
        return SConst(False, _info(meta))

    def abs(self, meta: Meta, items: List[Any]) -> SAbs:
        match items:
            case [Token() as name, body]:
                return SAbs(name.value, None, body, _info(meta))
            case [Token() as name, ty, body]:
                return SAbs(name.value, ty, body, _info(meta))
            case _:
                raise ValueError(f"Invalid abstraction items: {items}")

    def tabs(self, meta: Meta, items: List[Any]) -> STAbs:
        name, body = items
        return STAbs(name.value, body, _info(meta))

    def app(self, meta: Meta, items: List[Any]) -> SApp:
        fn, arg = items
        return SApp(fn, arg, _info(meta))

    def tapp(self, meta: Meta, items: List[Any]) -> STApp:
        term, ty = items
        return STApp(term, ty, _info(meta))

    def if_(self, meta: Meta, items: List[Any]) -> SIf:
        cond, then_term, else_term = items
        return SIf(cond, then_term, else_term, _info(meta))

    def let(self, meta: Meta, items: List[Any]) -> SLet:
        name, bound, body = items
        return SLet(name.value, bound, body, _info(meta))

    # Types
    def tyname(self, meta: Meta, items: List[Any]) -> STyName:
        token = items[0]
        return STyName(token.value, _token_info(token))

    def tybool(self, meta: Meta, items: List[Any]) -> STyBool:
        return STyBool(_info(meta))

    def arrow(self, meta: Meta, items: List[Any]) -> STyArr:
        param, result = items
        return STyArr(param, result, _info(meta))

    def forall(self, meta: Meta, items: List[Any]) -> SurfaceNode:
        *names, body = items
        # ∀X,Y. T is ∀X. ∀Y. T, the first name outermost
        for name in reversed(names):
            body = STyAll(name.value, body, _token_info(name))
        return body

    # Context bindings
    def name_bind(self, meta: Meta, items: List[Any]) -> SNameBind:
        token = items[0]
        return SNameBind(token.value, _token_info(token))

    def var_bind(self, meta: Meta, items: List[Any]) -> SVarBind:
        token, ty = items
        return SVarBind(token.value, ty, _token_info(token))

    def tyvar_bind(self, meta: Meta, items: List[Any]) -> STyVarBind:
        token = items[0]
        return STyVarBind(token.value, _token_info(token))


def transform_parse_tree(tree: Tree) -> Any:
    return SurfaceTransformer().transform(tree)
