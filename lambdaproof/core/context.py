"""
Typing contexts: an immutable stack of named bindings, index 0 on top.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Set, Tuple, Union

from lambdaproof.core.types import Type, equal_types, type_shift


@dataclass(frozen=True)
class NameBind:
    """Term variable without a type"""


@dataclass(frozen=True)
class VarBind:
    """Term variable with a type.

    The type is relative to the context below the binding and must be shifted
    by ``index + 1`` when it is read through a variable (see ``Context.type_of``).
    """

    ty: Type


@dataclass(frozen=True)
class TyVarBind:
    """Type variable"""


Binding = Union[NameBind, VarBind, TyVarBind]
Entry = Tuple[str, Binding]


class ContextError(LookupError):
    pass


@dataclass(frozen=True)
class Context:
    entries: Tuple[Entry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def add(self, name: str, binding: Binding) -> "Context":
        """Return a new context with ``name`` bound on top."""
        return Context(((name, binding),) + self.entries)

    def add_name(self, name: str) -> "Context":
        return self.add(name, NameBind())

    def get(self, index: int) -> Entry:
        if index < 0 or index >= len(self.entries):
            raise ContextError(
                f"Variable lookup failure: offset {index}, context size {len(self)}",
            )
        return self.entries[index]

    def index_of(self, name: str) -> Optional[int]:
        for index, (bound_name, _) in enumerate(self.entries):
            if bound_name == name:
                return index
        return None

    def type_of(self, index: int) -> Type:
        name, binding = self.get(index)
        match binding:
            case VarBind(ty=ty):
                return type_shift(index + 1, ty)
            case _:
                raise ContextError(f"No type recorded for variable {name}")

    def names(self) -> List[str]:
        return [name for name, _ in self.entries]

    def free_type_names(self) -> Set[str]:
        result: Set[str] = set()
        for _, binding in self.entries:
            if isinstance(binding, VarBind):
                result |= binding.ty.free_vars()
        return result

    def map_types(self, fn: Callable[[Type], Type]) -> "Context":
        """Apply ``fn`` to every recorded type."""
        entries = []
        for name, binding in self.entries:
            if isinstance(binding, VarBind):
                binding = VarBind(fn(binding.ty))
            entries.append((name, binding))
        return Context(tuple(entries))


EMPTY_CONTEXT = Context()


def equal_contexts(ctx1: Context, ctx2: Context) -> bool:
    if len(ctx1) != len(ctx2):
        return False
    for (name1, binding1), (name2, binding2) in zip(ctx1, ctx2):
        if name1 != name2 or type(binding1) is not type(binding2):
            return False
        if isinstance(binding1, VarBind) and isinstance(binding2, VarBind):
            if not equal_types(binding1.ty, binding2.ty):
                return False
    return True
