"""
Substitutions of free type names, as produced by unification.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from lambdaproof.core.context import Context
from lambdaproof.core.types import Type, substitute_name

Pair = Tuple[Type, str]


@dataclass(frozen=True)
class Substitution:
    """Ordered ``(replacement, name)`` pairs, newest first.

    Applying the substitution folds from the right: the oldest pair is applied
    first, so ``s2.compose(s1)`` means "apply s1, then s2".
    """

    pairs: Tuple[Pair, ...] = ()

    @staticmethod
    def empty() -> "Substitution":
        return EMPTY_SUBSTITUTION

    @staticmethod
    def singleton(name: str, ty: Type) -> "Substitution":
        return Substitution(((ty, name),))

    def apply(self, ty: Type) -> Type:
        """Apply this substitution to a type"""
        for replacement, name in reversed(self.pairs):
            ty = substitute_name(name, replacement, ty)
        return ty

    def apply_context(self, ctx: Context) -> Context:
        if not self.pairs:
            return ctx
        return ctx.map_types(self.apply)

    def compose(self, other: "Substitution") -> "Substitution":
        """Compose two substitutions: (self ∘ other)"""
        return Substitution(self.pairs + other.pairs)

    def names(self) -> List[str]:
        return [name for _, name in self.pairs]

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    def __str__(self) -> str:
        if not self.pairs:
            return "∅"
        items = [f"{name} ↦ {ty}" for ty, name in reversed(self.pairs)]
        return "{" + ", ".join(items) + "}"


EMPTY_SUBSTITUTION = Substitution()
