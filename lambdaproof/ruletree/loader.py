"""
Rule trees stored as YAML documents.

    system: hm
    tree:
      context: "x: Bool"
      term: "x"
      type: "Bool"
      rule: var
      premises: []
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

from lambdaproof.parser.parser import parse_type
from lambdaproof.ruletree.nodes import Rule, RuleTree
from lambdaproof.typechecker.substitution import Substitution
from lambdaproof.typechecker.systems import TypeSystem

logger = logging.getLogger(__name__)

TREE_KEYS = {"context", "term", "type", "rule", "premises", "substitution", "expect"}


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, (str, bool)):
        raise ValueError(f"'{key}' must be a string, got {value!r}")
    # YAML reads a bare true/false as a boolean
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _rule(data: Mapping[str, Any]) -> Rule:
    value = data.get("rule") or Rule.NONE.value
    try:
        return Rule(str(value).lower())
    except ValueError:
        raise ValueError(f"Unknown rule: {value}") from None


def _substitution(data: Mapping[str, Any]) -> Substitution:
    """Read ``{name: type}`` pairs, applied in the order they are written."""
    raw = data.get("substitution") or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"'substitution' must be a mapping, got {raw!r}")
    subst = Substitution.empty()
    for name, text in raw.items():
        subst = Substitution.singleton(str(name), parse_type(str(text))).compose(subst)
    return subst


def tree_from_mapping(data: Mapping[str, Any]) -> RuleTree:
    if not isinstance(data, Mapping):
        raise ValueError(f"A rule tree node must be a mapping, got {data!r}")
    unknown = set(data) - TREE_KEYS
    if unknown:
        raise ValueError(f"Unknown keys in rule tree node: {', '.join(sorted(unknown))}")
    premises = data.get("premises") or []
    if not isinstance(premises, list):
        raise ValueError(f"'premises' must be a list, got {premises!r}")
    return RuleTree(
        context_text=_text(data, "context"),
        term_text=_text(data, "term"),
        type_text=_text(data, "type"),
        rule=_rule(data),
        children=tuple(tree_from_mapping(premise) for premise in premises),
        substitution=_substitution(data),
    )


def load_document(path: Path) -> Mapping[str, Any]:
    with open(path, "r", encoding="utf-8") as file:
        document = yaml.safe_load(file)
    if not isinstance(document, Mapping) or "tree" not in document:
        raise ValueError(f"{path}: expected a mapping with a 'tree' key")
    return document


def load_tree_document(path: Path) -> Tuple[Optional[TypeSystem], RuleTree]:
    """Load a rule tree and the type system it names, if any."""
    document = load_document(path)
    system = document.get("system")
    logger.debug("Loaded rule tree from %s (system: %s)", path, system)
    return (
        TypeSystem(system) if system is not None else None,
        tree_from_mapping(document["tree"]),
    )
