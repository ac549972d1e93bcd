#!/usr/bin/env python3
"""
FluentCheck CLI - Structural Equivalency Checker

Usage:
    fluentcheck run <suite.yaml> [OPTIONS]
    fluentcheck validate <suite.yaml>
    fluentcheck compare <subject.json> <expectation.json> [OPTIONS]
    fluentcheck --version
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .equivalency import EquivalencyOptions, check
from .execution import ConfigurationError
from .reporting import Reporter
from .suites import (
    DataSourceError,
    Suite,
    load_data_file,
    load_suite,
    resolve_source,
    select_at,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="fluentcheck",
    help="🔍 FluentCheck - Structural Equivalency Checker",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"🔍 FluentCheck v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    debug: bool = typer.Option(
        False, "--debug",
        help="Log comparison internals to stderr"
    ),
):
    """
    🔍 FluentCheck - Structural Equivalency Checker

    Compare object graphs member by member with declarative YAML suites.
    """
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def run_suite(
    suite: Suite,
    verbose: bool = True,
    quiet: bool = False,
) -> Reporter:
    """Execute every case of a suite and return the reporter with results."""
    reporter = Reporter.from_suite(suite)
    reporter.start_run()
    logger.info(f"Running suite '{suite.name}' with {len(suite.cases)} case(s)")

    if verbose and not quiet:
        console.print(f"\n{'='*60}")
        console.print(f"  [bold]Running:[/bold] {escape(suite.name)}")
        console.print(f"  [bold]Cases:[/bold] {len(suite.cases)}")
        console.print(f"{'='*60}\n")

    for case in suite.cases:
        if verbose and not quiet:
            console.print(f"▶ [bold]Case:[/bold] {escape(case.id)}")

        try:
            config = suite.options_for(case).build()
            reporter.start_case(case.id, options=str(config))

            subject = resolve_source(case.subject)
            expectation = resolve_source(case.expectation)
            if case.at:
                subject = select_at(subject, case.at)
                expectation = select_at(expectation, case.at)

            result = check(subject, expectation, config, case.reason)
        except (ConfigurationError, DataSourceError, ValueError) as e:
            logger.debug(f"Case '{case.id}' errored: {e}")
            reporter.complete_case_error(case.id, str(e))
            if not quiet:
                console.print(f"  [yellow]⚠️  Error:[/yellow] {escape(str(e))}")
            continue

        if result.is_equivalent:
            reporter.complete_case_success(case.id)
            if verbose and not quiet:
                console.print("  [green]✅ Equivalent[/green]")
        else:
            reporter.complete_case_failure(case.id, result.mismatches, failure_message=str(result))
            if not quiet:
                console.print(f"  [red]❌ {len(result.mismatches)} difference(s)[/red]")
                for mismatch in result.mismatches:
                    console.print(f"     └─ {escape(mismatch.message)}")

    reporter.finish_run()
    return reporter


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    verbose: bool = typer.Option(
        True, "--verbose/--no-verbose", "-V",
        help="Show per-case output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors and final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save JSON reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save a JSON report file"
    ),
):
    """
    Run a comparison suite.

    Compare every case in the suite and generate a run report.
    """
    if output == "json":
        quiet = True

    if not quiet:
        console.print(f"\n📄 Loading suite: {suite_file}")

    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(escape(str(validation)))
        raise typer.Exit(code=1)

    if not quiet:
        console.print(f"   [green]✅ Valid suite:[/green] {escape(suite.name)}")

    reporter = run_suite(suite, verbose, quiet)
    report = reporter.report

    if output == "json":
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print("\n" + escape(report.summary()))

    if not no_report:
        report_dir.mkdir(parents=True, exist_ok=True)
        report_path = report_dir / f"{report.run_id}.json"
        reporter.save_json(report_path)
        if not quiet:
            console.print(f"\n📁 Report saved: {report_path}")

    if report.status.value == "passed":
        raise typer.Exit(code=0)
    else:
        raise typer.Exit(code=1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file.

    Check the schema and report any errors without running the suite.
    """
    console.print(f"\n📄 Validating: {suite_file}")

    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(escape(str(validation)))
        raise typer.Exit(code=1)

    console.print(f"\n[green]✅ Valid suite:[/green] {escape(suite.name)}")
    console.print(f"   Cases: {len(suite.cases)}")

    table = Table(title="Cases")
    table.add_column("ID", style="cyan")
    table.add_column("Subject", style="magenta")
    table.add_column("Expectation", style="magenta")
    table.add_column("At")

    for case in suite.cases:
        table.add_row(
            escape(case.id),
            escape(case.subject.describe()),
            escape(case.expectation.describe()),
            escape(case.at or ""),
        )

    console.print()
    console.print(table)
    raise typer.Exit(code=0)


@app.command()
def compare(
    subject_file: Path = typer.Argument(
        ...,
        help="JSON or YAML file holding the actual data",
        exists=True,
        readable=True,
    ),
    expectation_file: Path = typer.Argument(
        ...,
        help="JSON or YAML file holding the expected data",
        exists=True,
        readable=True,
    ),
    at: Optional[str] = typer.Option(
        None, "--at", "-a",
        help="JSONPath applied to both documents before comparing"
    ),
    non_recursive: bool = typer.Option(
        False, "--non-recursive",
        help="Compare nested objects by equality instead of member by member"
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-x",
        help="Member path to leave out (repeatable)"
    ),
    ignore_case: bool = typer.Option(
        False, "--ignore-case", "-i",
        help="Compare strings case-insensitively"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
):
    """
    Compare two JSON/YAML documents directly.

    Exits with 0 when they are equivalent, 1 when they differ and 2 when
    they cannot be compared.
    """
    options = EquivalencyOptions.default()
    if non_recursive:
        options.excluding_nested_objects()
    if exclude:
        options.excluding(*exclude)
    if ignore_case:
        options.using(str, lambda s, e: isinstance(s, str) and s.casefold() == e.casefold())

    try:
        subject = load_data_file(subject_file)
        expectation = load_data_file(expectation_file)
        if at:
            subject = select_at(subject, at)
            expectation = select_at(expectation, at)
        result = check(subject, expectation, options)
    except (ConfigurationError, DataSourceError) as e:
        console.print(f"[red]❌ Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)

    if output == "json":
        console.print_json(data={
            "equivalent": result.is_equivalent,
            "mismatches": [m.to_dict() for m in result.mismatches],
        })
    elif result.is_equivalent:
        console.print("[green]✅ Documents are equivalent[/green]")
    else:
        console.print(f"[red]❌ Found {len(result.mismatches)} difference(s):[/red]\n")
        for mismatch in result.mismatches:
            console.print(escape(str(mismatch)))

    raise typer.Exit(code=0 if result.is_equivalent else 1)


@app.command()
def info():
    """
    Show information about FluentCheck.
    """
    console.print(f"""
🔍 [bold]FluentCheck[/bold] v{__version__}

Structural Equivalency Checker

[bold]Features:[/bold]
  • Member-by-member comparison of nested objects
  • Every difference reported with its path
  • Include/exclude rules and per-type equality overrides
  • Cycle detection and type conversion
  • Declarative YAML suites with JSON run reports

[bold]Quick Start:[/bold]
  fluentcheck run suites/orders.yaml
  fluentcheck validate suites/orders.yaml
  fluentcheck compare actual.json expected.json --exclude id
""")


if __name__ == "__main__":
    app()
