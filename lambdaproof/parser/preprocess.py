"""
Rewrites ASCII shorthands into the canonical glyphs understood by the grammar.

    forall, forAll, Forall, ForAll  ->  ∀
    Lambda, |, ^                    ->  Λ   (type abstraction)
    lambda, \\                       ->  λ   (term abstraction)
    ->                              ->  →
    Let, In, If, Then, Else         ->  let, in, if, then, else
"""

import re
from typing import List, Tuple

# keyword forms come before the single characters they could overlap with
REPLACEMENTS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\b(?:forall|forAll|Forall|ForAll)\b"), "∀"),
    (re.compile(r"\bLambda\b"), "Λ"),
    (re.compile(r"\blambda\b"), "λ"),
    (re.compile(r"\\"), "λ"),
    (re.compile(r"[|^]"), "Λ"),
    (re.compile(r"->"), "→"),
    (re.compile(r"\bLet\b"), "let"),
    (re.compile(r"\bIn\b"), "in"),
    (re.compile(r"\bIf\b"), "if"),
    (re.compile(r"\bThen\b"), "then"),
    (re.compile(r"\bElse\b"), "else"),
]


def preprocess_with_offsets(text: str) -> Tuple[str, List[int]]:
    """Rewrite ``text`` and track where each character of the result came from.

    The offset list holds, for every position of the rewritten text plus the
    end of input, the matching position in ``text``. A glyph maps to the start
    of the shorthand it replaced.
    """
    offsets = list(range(len(text) + 1))
    for pattern, glyph in REPLACEMENTS:
        pieces: List[str] = []
        new_offsets: List[int] = []
        last = 0
        for match in pattern.finditer(text):
            pieces.append(text[last : match.start()])
            new_offsets.extend(offsets[last : match.start()])
            pieces.append(glyph)
            new_offsets.extend([offsets[match.start()]] * len(glyph))
            last = match.end()
        pieces.append(text[last:])
        new_offsets.extend(offsets[last:])
        text = "".join(pieces)
        offsets = new_offsets
    return text, offsets


def preprocess(text: str) -> str:
    return preprocess_with_offsets(text)[0]
