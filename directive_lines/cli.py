from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.text import Text

from directive_lines import __version__
from directive_lines.command_catalog import get_command_catalog
from directive_lines.linter import Linter, report_to_dict
from directive_lines.rules.base import InvalidRuleOptionsError
from directive_lines.rules.lines_around_directive import RULE_ID
from directive_lines.utils.config import (
    DEFAULT_CONFIG_PATH,
    OUTPUT_FORMATS,
    SOURCE_TYPE_MODES,
    config_hash,
    load_config,
)
from directive_lines.utils.structured_data import dump_structured_data
from directive_lines.utils.types import LintReport

app = typer.Typer(help='Enforce or disallow blank lines around "use strict" directives.')
rules_app = typer.Typer(help="Rule registry utilities.")

app.add_typer(rules_app, name="rules")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show directive-lines version and exit.",
    ),
) -> None:
    del version


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _parse_rule_option(value: str) -> Any:
    if value in {"always", "never"}:
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(
            'option must be "always", "never" or a JSON object such as '
            '{"before": "never", "after": "always"}'
        ) from exc


def _render_report(report: LintReport) -> None:
    console = Console(highlight=False)
    for result in report.files:
        if result.fatal:
            console.print(Text(result.path, style="bold underline"), soft_wrap=True)
            console.print(Text(f"  fatal  {result.fatal}", style="red"), soft_wrap=True)
            continue
        if not result.messages:
            continue
        console.print(Text(result.path, style="bold underline"), soft_wrap=True)
        for message in result.messages:
            line = Text(f"  {message.line}:{message.column}  ")
            line.append(message.severity, style="red")
            line.append(f"  {message.message}  ")
            line.append(message.rule_id, style="dim")
            console.print(line, soft_wrap=True)
    style = "green" if not report.error_count and not report.fatal_count else "bold red"
    console.print(Text(report.summary, style=style), soft_wrap=True)


@app.command()
def check(
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories to lint"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
    option: Optional[str] = typer.Option(
        None,
        "--option",
        help='Options for lines-around-directive: always, never or a JSON object with "before" and "after".',
    ),
    output_format: Optional[str] = typer.Option(None, "--format", help="Output format: text or json."),
    source_type: Optional[str] = typer.Option(
        None,
        "--source-type",
        help="Parse files as script or module. Default: auto (module for .mjs).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _configure_logging(verbose)
    if output_format is not None and output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"format must be one of: {', '.join(sorted(OUTPUT_FORMATS))}")
    if source_type is not None and source_type not in SOURCE_TYPE_MODES:
        raise typer.BadParameter(
            f"source_type must be one of: {', '.join(sorted(SOURCE_TYPE_MODES))}"
        )

    try:
        config = load_config(config_path)
    except RuntimeError as exc:
        typer.echo(f"Configuration error: {exc}")
        raise typer.Exit(code=2)

    if option is not None:
        config = dict(config)
        config["rules"] = {**config.get("rules", {}), RULE_ID: _parse_rule_option(option)}
    if source_type is not None:
        config = dict(config)
        config["source"] = {**config.get("source", {}), "source_type": source_type}

    try:
        linter = Linter(config=config)
    except InvalidRuleOptionsError as exc:
        raise typer.BadParameter(str(exc)) from exc

    report = linter.lint_paths(paths)

    if (output_format or config.get("output", {}).get("format")) == "json":
        typer.echo(json.dumps(report_to_dict(report), indent=2))
    else:
        _render_report(report)

    if report.fatal_count:
        raise typer.Exit(code=2)
    if report.error_count:
        raise typer.Exit(code=1)


@app.command(name="config")
def show_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
    as_json: bool = typer.Option(False, "--as-json", help="Print config as JSON"),
) -> None:
    try:
        config = load_config(config_path)
    except RuntimeError as exc:
        typer.echo(f"Configuration error: {exc}")
        raise typer.Exit(code=2)
    if as_json:
        typer.echo(json.dumps({"config": config, "hash": config_hash(config)}, indent=2))
        return
    typer.echo(dump_structured_data(config))
    typer.echo(f"# config hash: {config_hash(config)}")


@rules_app.command("list")
def rules_list(
    as_json: bool = typer.Option(False, "--as-json", help="Print rules as JSON"),
) -> None:
    rules = Linter().available_rules()
    if as_json:
        typer.echo(json.dumps(rules, indent=2))
        return
    for rule in rules:
        typer.echo(f"- {rule['rule_id']}: {rule['description']} [{rule['category']}]")


@app.command("command-catalog")
def command_catalog() -> None:
    for command in get_command_catalog():
        typer.echo(command)
