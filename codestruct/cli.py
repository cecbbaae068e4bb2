"""CLI entry point for Codestruct."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from codestruct.core.config import CodestructConfig, load_config
from codestruct.core.exceptions import ConfigError, SourceReadError
from codestruct.core.logging import configure_logging
from codestruct.core.models import Element
from codestruct.core.outliner import Outliner

app = typer.Typer(
    name="codestruct",
    help="Lightweight structural outlines for C#, Java, JS/TS, Vue and HTML files.",
    no_args_is_help=True,
)
console = Console()

_MAX_COMMENT_DISPLAY = 60

_KIND_STYLES = {
    "namespace": "magenta",
    "class": "bold cyan",
    "interface": "cyan",
    "enum": "cyan",
    "constructor": "green",
    "method": "green",
    "function": "green",
    "property": "yellow",
    "field": "yellow",
    "variable": "white",
    "module": "blue",
}


def element_to_dict(element: Element, show_docs: bool = True) -> dict[str, Any]:
    """JSON form of an element, optionally without documentation pseudo-elements."""
    result = element.to_dict()
    if not show_docs:
        result["children"] = [
            element_to_dict(c, show_docs) for c in element.children if not c.is_pseudo
        ]
    return result


def format_element(element: Element) -> str:
    """Format one element as a single Rich markup line."""
    if element.is_pseudo:
        text = escape(element.name)
        if element.comment:
            text += f" [dim]{escape(element.comment)}[/]"
        return f"[italic]{text}[/]"

    style = _KIND_STYLES.get(element.kind.value, "white")
    text = f"[{style}]{escape(element.name)}[/]"
    if element.parameters is not None:
        text += escape(f"({element.parameters})")
    if element.return_type:
        text += f" [dim]: {escape(element.return_type)}[/]"
    text += f" [dim]{element.kind.value} · line {element.line}[/]"
    if element.comment:
        comment = element.comment
        if len(comment) > _MAX_COMMENT_DISPLAY:
            comment = comment[: _MAX_COMMENT_DISPLAY - 3] + "..."
        text += f" [green]// {escape(comment)}[/]"
    return text


def print_tree(
    elements: list[Element], show_docs: bool = True, prefix: str = ""
) -> None:
    """Print elements as an indented tree."""
    visible = [e for e in elements if show_docs or not e.is_pseudo]
    for i, element in enumerate(visible):
        is_last = i == len(visible) - 1
        branch = "└─" if is_last else "├─"
        console.print(f"{prefix}{branch} {format_element(element)}")
        print_tree(element.children, show_docs, prefix + ("   " if is_last else "│  "))


def _config(ctx: typer.Context) -> CodestructConfig:
    config = ctx.obj
    if isinstance(config, CodestructConfig):
        return config
    return load_config()


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"),
    ] = None,
) -> None:
    """Lightweight structural outlines for source files."""
    try:
        config = load_config()
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e

    if log_level:
        configure_logging(level=log_level, json_format=config.logging.json_format)
    else:
        configure_logging(config=config.logging)
    ctx.obj = config


@app.command()
def outline(
    ctx: typer.Context,
    files: Annotated[list[Path], typer.Argument(help="Files to outline")],
    kind: Annotated[
        str | None, typer.Option("--kind", "-k", help="Kind key overriding the extension, e.g. .cs")
    ] = None,
    offset: Annotated[int, typer.Option("--offset", help="Added to every reported line")] = 0,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    no_docs: Annotated[
        bool, typer.Option("--no-docs", help="Hide description/parameter/returns nodes")
    ] = False,
) -> None:
    """Show the structure of one or more files."""
    outliner = Outliner(settings=_config(ctx).scan)
    show_docs = not no_docs
    results: list[dict[str, Any]] = []
    failed = False

    for file in files:
        try:
            elements = outliner.outline_file(file, kind=kind, offset=offset)
        except SourceReadError as e:
            failed = True
            if output_json:
                results.append({"file": str(file), "error": str(e)})
            else:
                console.print(f"[red]{escape(str(e))}[/red]")
            continue

        if elements is None:
            if output_json:
                results.append({"file": str(file), "unsupported": True})
            else:
                console.print(f"[yellow]Unsupported file kind:[/] {escape(str(file))}")
            continue

        if output_json:
            results.append(
                {"file": str(file), "elements": [element_to_dict(e, show_docs) for e in elements]}
            )
            continue

        console.print(f"\n[bold]{escape(str(file))}[/]")
        if not elements:
            console.print("  [dim]No elements found[/]")
        else:
            print_tree(elements, show_docs)

    if output_json:
        print(json.dumps(results))

    if failed:
        raise typer.Exit(code=1)


@app.command()
def kinds(
    ctx: typer.Context,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List the supported file kinds."""
    outliner = Outliner(settings=_config(ctx).scan)
    keys = sorted(outliner.registry.list_keys())

    if output_json:
        print(json.dumps(keys))
    else:
        for key in keys:
            console.print(f"[cyan]{key}[/cyan]")


if __name__ == "__main__":
    app()
