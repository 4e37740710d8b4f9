from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import typer
import uvicorn
from jinja2 import TemplateError
from rich.console import Console
from rich.table import Table

from .attribute import to_jsonable
from .config import build_connector, get_search_defaults, load_yaml_files
from .connector import (
    CONFIG_LDAP_ID,
    FILTER_BASE_DN,
    FILTER_LDAP_FILTER,
    LdapSearchConnector,
)
from .templating import parse_vars, render_fields

cli = typer.Typer(
    name="ldapsource", context_settings={"help_option_names": ["-h", "--help"]}
)

HELP_TEXT = """
ldapsource CLI

Commands:
  search CONFIG...      Run an LDAP search and print the matching DNs
  test CONFIG...        Check that the configured LDAP endpoint is available
  fields                List the fields a search returns
  describe              Print the configuration and filter field metadata
  serve CONFIG...       Serve the connector over HTTP

Options:
  -b, --base-dn         Search base (overrides config)
  -f, --filter          LDAP filter (overrides config)
  -V, --var KEY=VALUE   Value for a {{ KEY }} placeholder in base DN or filter
  -j, --json            Print results as JSON
  -o, --output-file     Write JSON results to file
  -q, --quiet           Suppress stdout printing
  -v, --verbose         Log progress to stderr
  -h, --help            Show this help message

Examples:
  ldapsource search ldap.yaml -b dc=example,dc=com -f '(objectClass=group)'
  ldapsource search ldap.yaml -f '(member={{ dn | ldap_escape }})' -V dn=cn=alice
"""

logger = logging.getLogger(__name__)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)


def _load_connector(config: List[str]) -> LdapSearchConnector:
    cfg = load_yaml_files(config)
    logger.info("loaded config from %s", config)
    return build_connector(cfg)


@cli.command("help")
def help_cmd():
    """Show this CLI help."""
    typer.echo(HELP_TEXT)


@cli.command("h")
def h_cmd():
    """Alias for help."""
    typer.echo(HELP_TEXT)


def run_search(
    config_paths: List[str], filter_fields: Dict[str, Optional[str]]
) -> Dict[str, Any]:
    """Programmatic helper: load config, run one search, return the values."""
    connector = _load_connector(config_paths)
    return connector.retrieve_values(connector.get_available_fields(), filter_fields)


def _print_names(names: List[str]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="bright_black", justify="right")
    table.add_column("Distinguished name", style="cyan")
    for i, name in enumerate(names, 1):
        table.add_row(str(i), name)
    console.print(table)


search_base_opt = typer.Option(None, "--base-dn", "-b", help="Search base DN")
search_filter_opt = typer.Option(None, "--filter", "-f", help="LDAP search filter")
search_var_opt = typer.Option(
    None, "--var", "-V", help="KEY=VALUE for {{ KEY }} placeholders"
)
as_json_opt = typer.Option(False, "--json", "-j", help="Print results as JSON")
output_file_opt = typer.Option(
    None, "--output-file", "-o", help="Write JSON results to file"
)
quiet_opt = typer.Option(False, "--quiet", "-q", help="Suppress stdout printing")
verbose_opt = typer.Option(False, "--verbose", "-v", help="Log progress to stderr")
strict_opt = typer.Option(
    False, "--strict", help="Exit non-zero and report the cause when the search fails"
)


@cli.command()
def search(
    config: List[str],
    base_dn: Optional[str] = search_base_opt,
    search_filter: Optional[str] = search_filter_opt,
    var: Optional[List[str]] = search_var_opt,
    as_json: bool = as_json_opt,
    output_file: Optional[str] = output_file_opt,
    quiet: bool = quiet_opt,
    verbose: bool = verbose_opt,
    strict: bool = strict_opt,
):
    """Run an LDAP search and print the matching DNs."""
    _setup_logging(verbose)
    cfg = load_yaml_files(config)
    connector = build_connector(cfg)

    fields: Dict[str, Optional[str]] = dict(get_search_defaults(cfg))
    if base_dn is not None:
        fields[FILTER_BASE_DN] = base_dn
    if search_filter is not None:
        fields[FILTER_LDAP_FILTER] = search_filter

    errors = connector.get_source_descriptor().filter_descriptor.validate(fields)
    if errors:
        for e in errors:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    try:
        fields = render_fields(fields, parse_vars(var))
    except (ValueError, TemplateError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    if strict:
        result = connector.search(fields.get(FILTER_BASE_DN), fields.get(FILTER_LDAP_FILTER))
        status = result["status"]
        if not status["success"]:
            typer.echo(
                f"Error: search failed ({status['error']}): {'; '.join(status['notes'])}",
                err=True,
            )
            raise typer.Exit(1)
        values = connector.to_values(result)
    else:
        values = connector.retrieve_values(connector.get_available_fields(), fields)
    logger.info("search finished, fields returned: %s", list(values.keys()))
    payload = to_jsonable(values)

    if as_json or output_file:
        text = json.dumps(payload, indent=2)
        if output_file:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(text)
            logger.info("wrote results to %s", output_file)
        elif not quiet:
            typer.echo(text)
    elif not quiet:
        if not payload:
            typer.echo("no results (search failed or endpoint unavailable)")
        else:
            for name, value in payload.items():
                console.print(f"[bold]{name}[/bold]: {len(value)} entries")
                _print_names(value)


@cli.command()
def test(config: List[str], verbose: bool = verbose_opt):
    """Check that the configured LDAP endpoint is available."""
    _setup_logging(verbose)
    connector = _load_connector(config)
    errors = connector.get_source_descriptor().config_descriptor.validate(
        {CONFIG_LDAP_ID: connector.ldap_id}
    )
    for e in errors:
        typer.echo(f"Warning: {e}", err=True)
    if connector.test_connection():
        typer.echo(f"endpoint '{connector.ldap_id}' is available")
        return
    typer.echo(f"endpoint '{connector.ldap_id}' is not available", err=True)
    raise typer.Exit(1)


@cli.command()
def fields():
    """List the fields a search returns."""
    for name in LdapSearchConnector().get_available_fields():
        typer.echo(name)


@cli.command()
def describe():
    """Print the configuration and filter field metadata as JSON."""
    descriptor = LdapSearchConnector().get_source_descriptor()
    typer.echo(json.dumps(descriptor.to_dict(), indent=2))


@cli.command()
def serve(
    config: List[str],
    host: str = "127.0.0.1",
    port: int = 8000,
    verbose: bool = verbose_opt,
):
    """Serve the connector over HTTP."""
    from .api import create_app

    _setup_logging(verbose)
    connector = _load_connector(config)
    uvicorn.run(create_app(connector), host=host, port=port)


def main():
    cli()


if __name__ == "__main__":
    main()
