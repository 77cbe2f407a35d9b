"""CLI entry point for the response sampler."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from response_sampler.extractor.test_case_paths import TestCaseGroupError, list_test_case_groups
from response_sampler.models.config import DEFAULT_SERVICES, DEFAULT_TIMEOUT_MS, RunConfig
from response_sampler.orchestrator import Orchestrator
from response_sampler.samplers.profiles import BOBCAT_REDIRECTS, PROFILES
from response_sampler.samplers.sampler import UnknownServiceError

console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(logs_dir: Path, verbose: bool = False) -> None:
    """Log to the console and append to logs/error.log and logs/combined.log."""
    level = logging.DEBUG if verbose else logging.INFO
    logs_dir.mkdir(parents=True, exist_ok=True)
    file_formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    error_handler = logging.FileHandler(logs_dir / "error.log", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_formatter)

    combined_handler = logging.FileHandler(logs_dir / "combined.log", encoding="utf-8")
    combined_handler.setLevel(level)
    combined_handler.setFormatter(file_formatter)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(console=console, rich_tracebacks=True),
            error_handler,
            combined_handler,
        ],
        force=True,
    )


def _validate_group(ctx: click.Context, param: click.Parameter, value: str) -> str:
    groups = list_test_case_groups(ctx.obj["root_dir"] / "test-case-files")
    if value not in groups:
        raise click.BadParameter(
            f'"{value}" is not a recognized test group. '
            f"Please select from one of the following: {', '.join(groups) or '(none)'}"
        )
    return value


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--root-dir", default=".", type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding test-case-files/, response-samples/, screenshots/ and logs/",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, root_dir: Path) -> None:
    """Collect reference HTML responses from interchangeable backends."""
    ctx.ensure_object(dict)
    ctx.obj["root_dir"] = root_dir
    setup_logging(root_dir / "logs", verbose)


@cli.command()
@click.argument("test_case_group", callback=_validate_group)
@click.option(
    "--bobcat-redirects-endpoint", "-b",
    help="Override Bobcat Redirects endpoint",
)
@click.option(
    "--service", "-s", "services", multiple=True,
    help=f"Service to sample, in order (default: {', '.join(DEFAULT_SERVICES)})",
)
@click.option("--exclude", "-x", multiple=True, help="Service to skip")
@click.option("--headed", is_flag=True, help='Run Playwright in "headed" mode')
@click.option("--limit", "-l", type=click.IntRange(min=0), help="Set the number of samples to fetch")
@click.option("--replace", "-r", is_flag=True, help="Replace existing sample files and index entries")
@click.option(
    "--timeout", "-t", type=click.IntRange(min=0), default=DEFAULT_TIMEOUT_MS,
    show_default=True, help="Playwright timeout in milliseconds",
)
@click.option(
    "--sleep", "sleep_seconds", type=click.FloatRange(min=0), default=0.0,
    help="Seconds to wait between paths",
)
@click.pass_context
def sample(
    ctx: click.Context,
    test_case_group: str,
    bobcat_redirects_endpoint: str | None,
    services: tuple[str, ...],
    exclude: tuple[str, ...],
    headed: bool,
    limit: int | None,
    replace: bool,
    timeout: int,
    sleep_seconds: float,
) -> None:
    """Fetch response samples for TEST_CASE_GROUP from each service."""
    endpoint_overrides = {}
    if bobcat_redirects_endpoint:
        endpoint_overrides[BOBCAT_REDIRECTS.service_key] = bobcat_redirects_endpoint

    cfg = RunConfig(
        test_case_group=test_case_group,
        root_dir=ctx.obj["root_dir"],
        services=list(services) or list(DEFAULT_SERVICES),
        exclude=list(exclude),
        endpoint_overrides=endpoint_overrides,
        headed=headed,
        limit=limit,
        replace=replace,
        timeout_ms=timeout,
        sleep_seconds=sleep_seconds,
    )

    try:
        orchestrator = Orchestrator(cfg)
    except (TestCaseGroupError, UnknownServiceError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    result = orchestrator.run()

    console.print("\n[bold green]Sampling Complete[/bold green]")
    table = Table(title=f"Results: {result.test_case_group}")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Paths processed", str(result.processed))
    table.add_row("Succeeded", f"[green]{result.succeeded}[/green]")
    table.add_row("Failed", f"[red]{result.failed}[/red]")
    for service, count in result.failures_by_service().items():
        table.add_row(f"  {service} failures", str(count))
    table.add_row("Duration", f"{result.duration_seconds}s")
    console.print(table)

    for path in result.inconsistent_paths:
        console.print(f"[yellow]Incomplete sample set:[/yellow] {path}")


@cli.command()
@click.pass_context
def groups(ctx: click.Context) -> None:
    """List the available test case groups."""
    names = list_test_case_groups(ctx.obj["root_dir"] / "test-case-files")
    if not names:
        console.print("[yellow]No test case groups found[/yellow]")
        return
    for name in names:
        console.print(f"  {name}")


@cli.command()
@click.argument("test_case_group", callback=_validate_group)
@click.option("--limit", "-l", type=click.IntRange(min=0), help="Set the number of samples to fetch")
@click.option("--replace", "-r", is_flag=True, help="Include paths already in the index")
@click.pass_context
def pending(ctx: click.Context, test_case_group: str, limit: int | None, replace: bool) -> None:
    """List the paths a sample run would process."""
    cfg = RunConfig(
        test_case_group=test_case_group,
        root_dir=ctx.obj["root_dir"],
        limit=limit,
        replace=replace,
    )
    paths = Orchestrator(cfg).pending_paths()
    for path in paths:
        click.echo(path)
    console.print(f"[green]{len(paths)} paths pending[/green]")


@cli.command()
@click.argument("test_case_group", callback=_validate_group)
@click.pass_context
def status(ctx: click.Context, test_case_group: str) -> None:
    """Summarize the sample index of a test case group."""
    cfg = RunConfig(test_case_group=test_case_group, root_dir=ctx.obj["root_dir"])
    summary = Orchestrator(cfg).index_summary()

    table = Table(title=f"Index: {test_case_group} ({summary['entries']} paths)")
    table.add_column("Service", style="bold")
    table.add_column("Samples")
    table.add_column("Screenshots")
    for service in sorted(set(summary["samples"]) | set(summary["screenshots"])):
        table.add_row(
            service,
            str(summary["samples"].get(service, 0)),
            str(summary["screenshots"].get(service, 0)),
        )
    console.print(table)


@cli.command()
def services() -> None:
    """List the services that can be sampled."""
    for profile in PROFILES.values():
        console.print(f"[bold]{profile.service_key}[/bold] ({profile.name})")
        console.print(f"    endpoint: {profile.default_endpoint}")
        console.print(f"    ready: {profile.ready_selector}", markup=False)


if __name__ == "__main__":
    cli()
