"""Typer CLI entrypoint for pool-tags."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import AppConfig, ConfigRepository
from .engine import NormalizedTag
from .engine.exporter import FileExporter
from .errors import PoolTagError
from .logging_conf import available_run_logs, configure_logging, log_dir, run_log_file, tail_log
from .orchestrator import Orchestrator, PageStats, RunReport

app = typer.Typer(
    help="Generate display tags for Balancer v3 pools.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect or reset the configuration file.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Browse log files.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: AppConfig
    orchestrator: Orchestrator


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    config = repository.load_config()
    configure_logging(verbose=verbose)
    orchestrator = Orchestrator(config=config)
    return AppState(repository=repository, config=config, orchestrator=orchestrator)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _render_summary_table(report: RunReport, output_path: Path | None) -> Table:
    summary = report.summary
    table = Table(title="Run summary", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Pages", str(summary.pages))
    table.add_row("Fetched", str(summary.fetched))
    table.add_row("Duplicates", str(summary.duplicates))
    table.add_row("Skipped (invalid kind)", str(summary.skipped_invalid))
    table.add_row("Tags", str(summary.tags))
    if output_path is not None:
        table.add_row("Output", str(output_path))
    return table


def _render_preview_table(tags: Sequence[NormalizedTag]) -> Table:
    table = Table(title=f"First {len(tags)} tags", box=box.SIMPLE_HEAD)
    table.add_column("Contract Address", style="cyan", no_wrap=True)
    table.add_column("Public Name Tag", style="magenta")
    table.add_column("Public Note", overflow="fold")
    for tag in tags:
        table.add_row(tag.contract_address, tag.public_name_tag, tag.public_note)
    return table


def _render_error(exc: PoolTagError) -> Table:
    table = Table(title=f"Run failed ({exc.kind.value})", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Key", style="red")
    table.add_column("Value", overflow="fold")
    table.add_row("message", Text(exc.message))
    for key, value in exc.context.items():
        table.add_row(key, Text(str(value)))
    return table


def _export(tags: Sequence[NormalizedTag], output_dir: Path, fmt: str, chain_id: str) -> Path:
    run_tag = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    exporter = FileExporter(output_dir, f"balancer-v3-chain-{chain_id}", fmt, run_tag=run_tag)
    try:
        exporter.export_many(tag.as_dict() for tag in tags)
        exporter.flush()
    finally:
        exporter.close()
    return exporter.path


app.add_typer(config_app, name="config")
app.add_typer(log_app, name="log")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    ctx.obj = build_state(verbose)


@app.command("run", help="Fetch every pool and write its tags.")
def run(
    ctx: typer.Context,
    chain_id: Optional[str] = typer.Option(
        None,
        "--chain-id",
        help="Target chain id; defaults to the configured chain (42161, Arbitrum One).",
        show_default=False,
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        envvar="GRAPH_API_KEY",
        help="The Graph gateway API key.",
        show_default=False,
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", help="Output format: json, jsonl or csv.", show_default=False
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", help="Directory for the exported file.", show_default=False
    ),
    preview: int = typer.Option(0, "--preview", help="Print the first N tags.", min=0),
    quiet: bool = typer.Option(False, "--quiet", help="Print a one-line result only."),
) -> None:
    state = _get_state(ctx)
    chain_id = chain_id or state.config.subgraph.chain_id
    output_cfg = state.config.output
    effective_fmt = fmt or output_cfg.output_format
    if effective_fmt not in {"json", "jsonl", "csv"}:
        raise typer.BadParameter("--format must be json, jsonl or csv.")
    target_dir = output_dir or output_cfg.resolved_outputs_dir(state.repository.locator.project_root)

    if quiet:
        report = _execute(state, chain_id, api_key)
    else:
        with console.status("Fetching pools…") as status:

            def _on_page(stats: PageStats) -> None:
                status.update(
                    f"Page {stats.page}: {stats.fetched} pools, {stats.total_tags} tags so far"
                )

            report = _execute(state, chain_id, api_key, on_page=_on_page)

    output_path = _export(report.tags, target_dir, effective_fmt, chain_id)
    if quiet:
        console.print(f"{len(report.tags)} tags written to {output_path}")
        return
    console.print(_render_summary_table(report, output_path))
    if preview:
        console.print(_render_preview_table(report.tags[:preview]))


def _execute(
    state: AppState, chain_id: str, api_key: Optional[str], on_page=None
) -> RunReport:
    try:
        return state.orchestrator.run(chain_id, api_key, on_page=on_page)
    except PoolTagError as exc:
        console.print(_render_error(exc))
        raise typer.Exit(code=1) from exc


@config_app.command("show", help="Print the active configuration.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    console.print(f"# {state.repository.locator.config_path()}", style="dim")
    console.print(
        yaml.safe_dump(state.config.model_dump(mode="json"), sort_keys=False, allow_unicode=True),
        markup=False,
    )


@config_app.command("reset", help="Overwrite the configuration file with defaults.")
def config_reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    state = _get_state(ctx)
    path = state.repository.locator.config_path()
    if not yes and not typer.confirm(f"Overwrite {path} with defaults?"):
        console.print("Cancelled.", style="yellow")
        raise typer.Exit(code=1)
    state.repository.reset_config()
    console.print(f"Default configuration written to {path}", style="green")


@log_app.command("list", help="List per-chain run logs.")
def log_list() -> None:
    logs = list(available_run_logs())
    if not logs:
        console.print("No run logs yet.", style="dim")
        return
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("File", style="green")
    for path in logs:
        table.add_row(path.name)
    console.print(table)


@log_app.command("show", help="Show the tail of a log file.")
def log_show(
    chain_id: Optional[str] = typer.Option(
        None, "--chain", help="Chain id; the global log is shown when omitted."
    ),
    tail: int = typer.Option(100, "--tail", help="Number of lines to show.", min=1),
) -> None:
    path = run_log_file(chain_id) if chain_id else log_dir() / "pool_tags.log"
    lines = tail_log(path, tail)
    if not lines:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"{path.name} · last {len(lines)} lines", style="cyan")
    console.print("".join(lines), markup=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
