import re
from typing import Iterable, Set

_TRAILING_DIGITS = re.compile(r"\d+$")


def fresh_name(hint: str, taken: Iterable[str]) -> str:
    """Return ``hint`` or ``hint`` with a numeric suffix, avoiding ``taken``."""
    taken = set(taken)
    if hint not in taken:
        return hint
    base = _TRAILING_DIGITS.sub("", hint) or "T"
    counter = 1
    while f"{base}{counter}" in taken:
        counter += 1
    return f"{base}{counter}"


class FreshNameSupply:
    """Generates fresh type names: A, B, ..., Z, A1, B1, ..."""

    LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

    def __init__(self, used: Iterable[str] = ()) -> None:
        self.used: Set[str] = set(used)
        self.counter = 0

    def reserve(self, names: Iterable[str]) -> None:
        self.used.update(names)

    def fresh(self) -> str:
        """Generate a fresh type name"""
        while True:
            letter = self.LETTERS[self.counter % len(self.LETTERS)]
            round_ = self.counter // len(self.LETTERS)
            self.counter += 1
            name = letter if round_ == 0 else f"{letter}{round_}"
            if name not in self.used:
                self.used.add(name)
                return name

    def fresh_like(self, hint: str) -> str:
        name = fresh_name(hint, self.used)
        self.used.add(name)
        return name
