import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generator, List, Mapping

from lambdaproof.ruletree.checker import check_tree
from lambdaproof.ruletree.loader import load_document, tree_from_mapping
from lambdaproof.ruletree.nodes import CheckedTree
from lambdaproof.typechecker.systems import TypeSystem


@dataclass
class TreeExpectation:
    verdicts: List[str]


def _expected_verdicts(node: Mapping[str, Any]) -> List[str]:
    """Preorder list of the ``expect`` keys of a tree; a missing key means success."""
    verdicts = [node.get("expect", "success")]
    for premise in node.get("premises") or []:
        verdicts.extend(_expected_verdicts(premise))
    return verdicts


def _actual_verdicts(tree: CheckedTree) -> List[str]:
    verdicts = [tree.verdict.kind.value]
    for child in tree.children:
        verdicts.extend(_actual_verdicts(child))
    return verdicts


def _get_test_expectation(file_name: Path) -> TreeExpectation:
    """Reads the expected verdicts from the tree document itself.
    Format:
        system: simply-typed|hm|system-f
        tree:
          ...
          expect: success|no-rule|syntax|representation|prerequisite|not-in-system|premise
    """
    document = load_document(file_name)
    return TreeExpectation(verdicts=_expected_verdicts(document["tree"]))


def get_all_test_files(base_path: Path, extension: str) -> Generator[Path, None, None]:
    for root, _, files in os.walk(base_path):
        for file in sorted(files):
            if file.endswith("." + extension):
                yield Path(os.path.join(root, file))


def check_tree_file(file_name: Path) -> CheckedTree:
    document = load_document(file_name)
    system = TypeSystem(document.get("system", TypeSystem.HINDLEY_MILNER.value))
    return check_tree(tree_from_mapping(document["tree"]), system)


def file_test_tree(file_name: Path, runFn: Callable[[Path], CheckedTree]) -> None:
    expected = _get_test_expectation(file_name)
    result = _actual_verdicts(runFn(file_name))
    assert (
        result == expected.verdicts
    ), f"{file_name}: Expected verdicts {expected.verdicts}, got {result}"
