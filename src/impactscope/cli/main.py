"""Main CLI application for impactscope."""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from impactscope import __version__
from impactscope.analysis.pipeline import AnalysisPipeline
from impactscope.analysis.postprocess import ConciseReport, summarize_reports
from impactscope.core.config import ImpactScopeConfig
from impactscope.core.exceptions import ImpactScopeError
from impactscope.oracle.llm_oracle import LLMReasoningOracle
from impactscope.sources.loaders import AutoLoader
from impactscope.sources.store import RepositoryStore

app = typer.Typer(
    name="impactscope",
    help="impactscope - LLM-assisted change impact analysis for Java repositories",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

PRIORITY_STYLES = {"HIGH": "red", "MEDIUM": "yellow", "LOW": "green"}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"impactscope version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """impactscope - LLM-assisted change impact analysis for Java repositories."""
    pass


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )
    # Provider clients are chatty at DEBUG
    for noisy in ("httpx", "httpcore", "anthropic", "git"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def parse_repository(spec: str) -> tuple[str, str]:
    """
    Split ``ID=LOCATION`` into its parts.

    A bare location uses its last path component (without ``.git``) as id.
    """
    if "=" in spec:
        repo_id, location = spec.split("=", 1)
        return repo_id.strip(), location.strip()
    location = spec.strip()
    name = location.rstrip("/").rsplit("/", 1)[-1]
    return name.removesuffix(".git") or location, location


def build_store(config: ImpactScopeConfig, specs: list[str]) -> tuple[RepositoryStore, list[str]]:
    """Create a store holding the given repositories, returning their ids in order."""
    store = RepositoryStore(loader=AutoLoader(config.repositories))
    ids = []
    for spec in specs:
        repo_id, location = parse_repository(spec)
        store.add_repository(repo_id, location=location)
        ids.append(repo_id)
    return store, ids


def _show_reports(summaries: list[ConciseReport]) -> None:
    table = Table(title="Impact Analysis")
    table.add_column("Member", style="cyan")
    table.add_column("Type")
    table.add_column("Change")
    table.add_column("Risk", justify="right")
    table.add_column("Priority")
    table.add_column("Callers", justify="right")

    for summary in summaries:
        if summary.error:
            risk = "[red]failed[/red]"
        elif summary.risk_score:
            risk = str(summary.risk_score)
        else:
            risk = "-"
        priority = summary.priority.value if summary.priority else "-"
        style = PRIORITY_STYLES.get(priority, "dim")
        table.add_row(
            summary.changed_member,
            summary.member_type,
            summary.change_kind or "-",
            risk,
            f"[{style}]{priority}[/{style}]",
            str(len(summary.caller_files)),
        )
    console.print(table)

    for summary in summaries:
        if summary.error:
            console.print(f"[red]{summary.changed_member}[/red]: {summary.error}")
            continue
        if not summary.reasoning:
            continue
        lines = [summary.reasoning]
        for module in summary.impacted_modules:
            lines.append(f"  [bold]{module.impact_type.value}[/bold] {module.module_name}: {module.description}")
        if summary.test_strategy and summary.test_strategy.test_cases:
            lines.append(f"\nTests ({summary.test_strategy.scope}):")
            for case in summary.test_strategy.test_cases:
                lines.append(f"  - {case.test_type} in {case.module_name}: {case.focus}")
        console.print(Panel("\n".join(lines), title=summary.changed_member, border_style="blue"))


@app.command()
def analyze(
    repo: Annotated[
        str,
        typer.Option("--repo", "-r", help="Repository holding the target, as ID=PATH_OR_URL or PATH_OR_URL"),
    ],
    target: Annotated[
        str,
        typer.Option("--target", "-t", help="Target class (FQCN, simple name or path)"),
    ],
    changed: Annotated[
        Path,
        typer.Option("--changed", "-c", help="File with the modified source of the target", exists=True, dir_okay=False),
    ],
    compare: Annotated[
        Optional[list[str]],
        typer.Option("--compare", help="Additional repositories searched for callers (repeatable)"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="Config file (defaults to ~/.impactscope/config.yaml)"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the raw reports as JSON"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Analyze the impact of a changed Java file on its callers."""
    setup_logging(verbose)
    try:
        config = ImpactScopeConfig.load(config_path)
        store, ids = build_store(config, [repo, *(compare or [])])
        pipeline = AnalysisPipeline(
            store,
            LLMReasoningOracle(config.llm),
            config=config.pipeline,
            discovery_config=config.discovery,
        )
        content = changed.read_text(encoding="utf-8")
        reports = pipeline.run_analysis_sync(ids[0], ids[1:], content, target)

        if as_json:
            payload = [report.model_dump(mode="json", by_alias=True) for report in reports]
            console.print_json(json.dumps(payload))
            return

        _show_reports(summarize_reports(reports, target))

    except ImpactScopeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def repos(
    repo: Annotated[
        list[str],
        typer.Option("--repo", "-r", help="Repository as ID=PATH_OR_URL or PATH_OR_URL (repeatable)"),
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="Config file (defaults to ~/.impactscope/config.yaml)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """List the classes found in each repository."""
    setup_logging(verbose)
    try:
        config = ImpactScopeConfig.load(config_path)
        store, _ = build_store(config, repo)

        for repo_id, fqcns in store.metadata().items():
            table = Table(title=f"{repo_id} ({len(fqcns)} classes)", show_header=False)
            table.add_column("Class", style="cyan")
            for fqcn in fqcns:
                table.add_row(fqcn)
            console.print(table)

    except ImpactScopeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
