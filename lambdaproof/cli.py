import logging
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.tree import Tree

from lambdaproof.core.printer import show_context, show_term, show_type
from lambdaproof.errors import LambdaProofError
from lambdaproof.parser.parser import parse_context, parse_term, parse_type
from lambdaproof.ruletree.checker import check_tree
from lambdaproof.ruletree.loader import load_tree_document
from lambdaproof.ruletree.nodes import CheckedTree, RuleTree
from lambdaproof.typechecker.infer import type_of
from lambdaproof.typechecker.systems import TypeSystem, check_context, check_term
from lambdaproof.typechecker.unify import unify_type

app = typer.Typer(pretty_exceptions_enable=False)
console = Console()


@app.callback()
def setup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def parse(
    kind: str = typer.Argument(..., help="term|type|context"),
    text: str = typer.Argument(..., help="Text to parse"),
    context: str = typer.Option("", "--context", "-c", help="Context for terms and types"),
) -> int:
    try:
        match kind:
            case "term":
                ctx = parse_context(context)
                console.print(show_term(parse_term(text, ctx), ctx), markup=False)
            case "type":
                ctx = parse_context(context)
                console.print(show_type(parse_type(text, ctx), ctx), markup=False)
            case "context":
                console.print(show_context(parse_context(text)), markup=False)
            case _:
                console.print(f"Unknown kind: {kind}", style="bold red")
                raise typer.Exit(code=1)
    except LambdaProofError as e:
        console.print(str(e), style="bold red", markup=False)
        raise typer.Exit(code=1)
    return 0


@app.command()
def infer(
    term: str = typer.Argument(..., help="Term to infer a type for"),
    context: str = typer.Option("", "--context", "-c", help="Typing context"),
    system: TypeSystem = typer.Option(TypeSystem.HINDLEY_MILNER, "--system", "-s"),
) -> int:
    try:
        ctx = parse_context(context)
        parsed = parse_term(term, ctx)
        check_context(system, ctx)
        check_term(system, parsed)
        ty = type_of(ctx, parsed, system)
    except LambdaProofError as e:
        console.print(str(e), style="bold red", markup=False)
        raise typer.Exit(code=1)
    console.print(f"{show_term(parsed, ctx)} : {show_type(ty, ctx)}", markup=False)
    return 0


@app.command()
def unify(
    left: str = typer.Argument(..., help="First type"),
    right: str = typer.Argument(..., help="Second type"),
) -> int:
    try:
        subst = unify_type(parse_type(left), parse_type(right))
    except LambdaProofError as e:
        console.print(str(e), style="bold red", markup=False)
        raise typer.Exit(code=1)
    console.print(str(subst), markup=False)
    return 0


def _label(node: CheckedTree, context: str, term: str, ty: str) -> str:
    style = "green" if node.verdict.ok else "red"
    judgment = escape(f"{context} ⊢ {term} : {ty}")
    verdict = escape(str(node.verdict))
    return f"{judgment}  [bold]({node.rule.value})[/bold]  [{style}]{verdict}[/{style}]"


def _render(node: CheckedTree, texts: RuleTree, tree: Optional[Tree] = None) -> Tree:
    label = _label(node, texts.context_text, texts.term_text, texts.type_text)
    branch = Tree(label) if tree is None else tree.add(label)
    for child, child_texts in zip(node.children, texts.children):
        _render(child, child_texts, branch)
    return branch


@app.command()
def check(
    input_file: Path = typer.Argument(..., exists=True, help="Path to a YAML rule tree"),
    system: Optional[TypeSystem] = typer.Option(
        None, "--system", "-s", help="Overrides the system named in the file"
    ),
) -> int:
    try:
        file_system, tree = load_tree_document(input_file)
    except (OSError, ValueError, yaml.YAMLError, LambdaProofError) as e:
        console.print(str(e), style="bold red", markup=False)
        raise typer.Exit(code=1)
    selected = system or file_system or TypeSystem.HINDLEY_MILNER
    checked = check_tree(tree, selected)
    console.print(_render(checked, tree))
    if checked.ok:
        console.print("Rule tree is correct", style="bold green")
        return 0
    console.print("Rule tree has errors", style="bold red")
    raise typer.Exit(code=1)


def main() -> Any:
    return app()
