"""Gamma command-line interface."""

from __future__ import annotations

from pathlib import Path

import click

from gamma import __version__
from gamma.ast_nodes import Statement
from gamma.config import GammaConfig, discover_config
from gamma.errors import DiagnosticEmitter
from gamma.eval import Evaluator
from gamma.formatter import GammaFormatter
from gamma.parser import Parser
from gamma.source import SourceMap

_resync_option = click.option(
    "--resync/--no-resync",
    default=None,
    help="Skip to the next ';' after a malformed statement (default: from gamma.toml).",
)


def _read_source(file: str) -> str:
    try:
        return Path(file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"error: cannot read {file}: {e}", err=True)
        raise SystemExit(1)


def _make_emitter(config: GammaConfig, source_map: SourceMap) -> DiagnosticEmitter:
    return DiagnosticEmitter(
        source_map,
        color=config.diagnostics.color,
        warnings=config.diagnostics.warnings,
    )


def _parse_file(file: str, resync: bool | None) -> tuple[Parser, list[Statement]]:
    """Parse a file, emitting diagnostics to stderr as they are found."""
    config = discover_config(Path(file))
    if resync is None:
        resync = config.parser.resync
    source = _read_source(file)
    source_map = SourceMap()
    parser = Parser(
        source, file, source_map,
        emitter=_make_emitter(config, source_map),
        resync=resync,
    )
    return parser, parser.parse()


@click.group()
@click.version_option(__version__, prog_name="gamma")
def main() -> None:
    """The Gamma lambda-calculus front end."""


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--spans/--no-spans", default=True, help="Show source spans in the dump.")
@_resync_option
def parse(file: str, spans: bool, resync: bool | None) -> None:
    """Parse a Gamma source file and print its AST."""
    parser, statements = _parse_file(file, resync)
    for statement in statements:
        _dump_ast(statement, 0, spans)
    if parser.has_errors():
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@_resync_option
def check(file: str, resync: bool | None) -> None:
    """Parse a Gamma source file and check its bindings."""
    parser, statements = _parse_file(file, resync)
    evaluator = Evaluator(statements, file, emitter=parser.emitter)
    evaluator.eval()
    if parser.has_errors() or evaluator.has_errors():
        raise SystemExit(1)
    click.echo(f"checked {file}: {len(statements)} statement(s), no errors")


@main.command(name="format")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--check", is_flag=True, help="Check formatting without modifying the file.")
def format_cmd(file: str, check: bool) -> None:
    """Rewrite a Gamma source file in canonical form."""
    parser, statements = _parse_file(file, resync=False)
    if parser.has_errors():
        click.echo(f"error: not formatting {file}: it has syntax errors", err=True)
        raise SystemExit(1)

    formatted = GammaFormatter().format(statements)
    if formatted == parser.file.content:
        return
    if check:
        click.echo(f"would reformat {file}")
        raise SystemExit(1)
    Path(file).write_text(formatted, encoding="utf-8")
    click.echo(f"formatted {file}")


@main.command()
@_resync_option
def repl(resync: bool | None) -> None:
    """Parse lines interactively and print their ASTs."""
    config = discover_config()
    if resync is None:
        resync = config.parser.resync
    source_map = SourceMap()
    emitter = _make_emitter(config, source_map)

    while True:
        try:
            line = click.prompt(">>", prompt_suffix=" ", default="", show_default=False)
        except (EOFError, click.Abort):
            click.echo("bye")
            return
        parser = Parser(line, "<stdin>", source_map, emitter=emitter, resync=resync)
        click.echo(repr(parser.parse()))


@main.command()
def lsp() -> None:
    """Start the Gamma language server."""
    from gamma.lsp import main as lsp_main

    lsp_main()


def _dump_ast(node: object, depth: int, spans: bool) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if not hasattr(node, "__dataclass_fields__"):
        click.echo(f"{indent}{name}: {node!r}")
        return

    header = name
    if spans and hasattr(node, "span"):
        header += f" @ {node.span}"  # type: ignore[attr-defined]
    click.echo(f"{indent}{header}")
    for field_name in node.__dataclass_fields__:  # type: ignore[attr-defined]
        if field_name == "span":
            continue
        value = getattr(node, field_name)
        if field_name.endswith("_span"):
            if spans:
                click.echo(f"{indent}  {field_name}: {value}")
        elif hasattr(value, "__dataclass_fields__"):
            click.echo(f"{indent}  {field_name}:")
            _dump_ast(value, depth + 2, spans)
        else:
            click.echo(f"{indent}  {field_name}: {value!r}")
