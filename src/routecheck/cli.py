"""Click entry point: run route case files and inspect single URLs."""

from __future__ import annotations

import sys

import click
import yaml
from pydantic import ValidationError

from . import __version__
from .cases import load_cases, run_cases
from .config import ConfigError, configure_logging, engine_ref, load_engine
from .output import (
    EXIT_CLI_ERROR,
    EXIT_FAILED,
    EXIT_SUCCESS,
    encode_match_json,
    encode_match_toon,
    print_error,
    print_results,
)
from .probe import route


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _engine_or_fail(ctx: click.Context):
    try:
        return load_engine(engine_ref(ctx.obj.get("routes")))
    except ConfigError as e:
        print_error(e.code, e.message)
        sys.exit(EXIT_CLI_ERROR)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group(invoke_without_command=True)
@click.option("--routes", default=None, help="Routing engine as module:attribute or file.py:attribute")
@click.option("--json-output", "--json", "use_json", is_flag=True, help="Output JSON instead of TOON")
@click.option("--verbose", "-v", is_flag=True, help="Log each lookup and comparison")
@click.version_option(__version__)
@click.pass_context
def main(ctx: click.Context, routes: str | None, use_json: bool, verbose: bool) -> None:
    """routecheck: verify URLs route to the expected controller actions."""
    ctx.ensure_object(dict)
    ctx.obj["routes"] = routes
    ctx.obj["use_json"] = use_json
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# `run` subcommand
# ---------------------------------------------------------------------------

@main.command()
@click.argument("cases_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def run(ctx: click.Context, cases_file: str) -> None:
    """Check every case in a YAML or JSON case file."""
    engine = _engine_or_fail(ctx)

    try:
        case_file = load_cases(cases_file)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        print_error("CASES_INVALID", f"Invalid case file: {e}")
        sys.exit(EXIT_CLI_ERROR)

    results = run_cases(engine, case_file.cases)
    sys.exit(print_results(results, use_json=ctx.obj["use_json"]))


# ---------------------------------------------------------------------------
# `show` subcommand
# ---------------------------------------------------------------------------

@main.command()
@click.argument("url")
@click.option("--method", "-m", default=None, help="HTTP method for routes with a method constraint")
@click.pass_context
def show(ctx: click.Context, url: str, method: str | None) -> None:
    """Print the route values a URL resolves to."""
    engine = _engine_or_fail(ctx)
    match = route(engine, url, method.upper() if method else None)
    if match is None:
        print_error("NO_ROUTE", f"The URL did not match any route: {url}")
        sys.exit(EXIT_FAILED)

    if ctx.obj["use_json"]:
        click.echo(encode_match_json(url, match))
    else:
        click.echo(encode_match_toon(url, match))
    sys.exit(EXIT_SUCCESS)
