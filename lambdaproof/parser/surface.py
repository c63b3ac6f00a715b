"""
Named surface AST produced by the Lark transformer, before de Bruijn conversion.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from lambdaproof.core.info import Info


@dataclass
class SurfaceNode:
    pass


# Types
@dataclass
class STyName(SurfaceNode):
    name: str
    info: Optional[Info] = None


@dataclass
class STyBool(SurfaceNode):
    info: Optional[Info] = None


@dataclass
class STyArr(SurfaceNode):
    param: "SurfaceType"
    result: "SurfaceType"
    info: Optional[Info] = None


@dataclass
class STyAll(SurfaceNode):
    name: str
    body: "SurfaceType"
    info: Optional[Info] = None


# Terms
@dataclass
class SVar(SurfaceNode):
    name: str
    info: Optional[Info] = None


@dataclass
class SConst(SurfaceNode):
    value: bool
    info: Optional[Info] = None


@dataclass
class SAbs(SurfaceNode):
    name: str
    ty: Optional["SurfaceType"]
    body: "SurfaceTerm"
    info: Optional[Info] = None


@dataclass
class SApp(SurfaceNode):
    fn: "SurfaceTerm"
    arg: "SurfaceTerm"
    info: Optional[Info] = None


@dataclass
class SIf(SurfaceNode):
    condition: "SurfaceTerm"
    then_term: "SurfaceTerm"
    else_term: "SurfaceTerm"
    info: Optional[Info] = None


@dataclass
class STAbs(SurfaceNode):
    name: str
    body: "SurfaceTerm"
    info: Optional[Info] = None


@dataclass
class STApp(SurfaceNode):
    term: "SurfaceTerm"
    ty: "SurfaceType"
    info: Optional[Info] = None


@dataclass
class SLet(SurfaceNode):
    name: str
    bound: "SurfaceTerm"
    body: "SurfaceTerm"
    info: Optional[Info] = None


# Context bindings
@dataclass
class SNameBind(SurfaceNode):
    name: str
    info: Optional[Info] = None


@dataclass
class SVarBind(SurfaceNode):
    name: str
    ty: "SurfaceType"
    info: Optional[Info] = None


@dataclass
class STyVarBind(SurfaceNode):
    name: str
    info: Optional[Info] = None


SurfaceType = Union[STyName, STyBool, STyArr, STyAll]
SurfaceTerm = Union[SVar, SConst, SAbs, SApp, SIf, STAbs, STApp, SLet]
SurfaceBinding = Union[SNameBind, SVarBind, STyVarBind]
SurfaceContext = List[SurfaceBinding]
