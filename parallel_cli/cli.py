"""CLI entry point for running specs in parallel across browsers."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console

from parallel_cli.aggregator import aggregate
from parallel_cli.collector import ResultCollector
from parallel_cli.controller import RunController
from parallel_cli.dashboard import DashboardPointer
from parallel_cli.errors import (
    ConfigInvalidError,
    ResultsDirectoryMissingError,
    RunnerNotFoundError,
)
from parallel_cli.models.result import ResultsReport
from parallel_cli.models.run import RunSummary
from parallel_cli.pool import DEFAULT_STAGGER_INTERVAL, WorkerPool
from parallel_cli.process import ProcessLauncher
from parallel_cli.reporter import render_report
from parallel_cli.runners.loading import create_runner
from parallel_cli.settings import (
    DEFAULT_SETTINGS_FILENAME,
    load_settings,
    resolve_run_config,
)

DASHBOARD_STATE_FILENAME = ".parallel-cli-dashboard"

log = logging.getLogger("parallel_cli")


def log_run_summary(summary: RunSummary) -> None:
    """Log a one-line outcome per browser pass."""
    log.info("=" * 80)
    log.info("Run %s finished", summary.build_id)
    for browser_pass in summary.passes:
        if browser_pass.skipped:
            log.info("%s: skipped (no specs)", browser_pass.browser)
            continue
        log.info(
            "%s: %d slot(s), %d failed, %d result record(s)",
            browser_pass.browser,
            len(browser_pass.slots),
            browser_pass.failed_slots,
            browser_pass.observed,
        )
    log.info("=" * 80)


async def report(project_dir: Path, settings_path: Path, console: Console) -> int:
    """Render the results of the latest run."""
    try:
        settings = await load_settings(settings_path)
    except ConfigInvalidError as exc:
        log.error("%s", exc)
        return 1

    dashboard = DashboardPointer(state_file=project_dir / DASHBOARD_STATE_FILENAME)
    try:
        results = aggregate(project_dir / settings.results_dir)
    except ResultsDirectoryMissingError as exc:
        log.error("%s", exc)
        return 1

    render_report(console, results, dashboard.load())
    return 0


async def run(
    project_dir: Path,
    settings_path: Path,
    console: Console,
    *,
    preset: str | None = None,
    recorded: bool = True,
    stagger_interval: float = DEFAULT_STAGGER_INTERVAL,
) -> int:
    """Run all configured browsers and render the aggregated results."""
    try:
        settings = await load_settings(settings_path)
        config = resolve_run_config(settings, preset, recorded=recorded)
        runner = create_runner(settings.runner, settings.runner_config)
    except (ConfigInvalidError, RunnerNotFoundError) as exc:
        log.error("%s", exc)
        return 1

    results_root = project_dir / settings.results_dir
    dashboard = DashboardPointer(state_file=project_dir / DASHBOARD_STATE_FILENAME)
    controller = RunController(
        runner=runner,
        pool=WorkerPool(
            dashboard=dashboard,
            launcher=ProcessLauncher(cwd=project_dir),
            stagger_interval=stagger_interval,
            dashboard_pattern=runner.dashboard_pattern,
        ),
        collector=ResultCollector(results_root=results_root),
        dashboard=dashboard,
        project_dir=project_dir,
    )

    summary = await controller.run(config)
    log_run_summary(summary)

    try:
        results = aggregate(results_root)
    except ResultsDirectoryMissingError:
        log.warning("No result records were written during this run")
        results = ResultsReport(groups=[])

    render_report(console, results, summary.dashboard_url, summary.passes)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parallel-cli",
        description="Run end-to-end specs in parallel across browsers",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help=f"Settings file (default: <project-dir>/{DEFAULT_SETTINGS_FILENAME})",
    )
    parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path.cwd(),
        help="Project directory the runner is started in (default: cwd)",
    )
    parser.add_argument(
        "--stagger",
        type=float,
        default=DEFAULT_STAGGER_INTERVAL,
        help="Seconds between process starts of consecutive slots",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    run_parser = commands.add_parser(
        "run", help="Run specs, recording when a record key is set"
    )
    run_parser.add_argument("preset", nargs="?", help="Preset to load before running")
    norecord_parser = commands.add_parser(
        "run-norecord", help="Run specs without recording"
    )
    norecord_parser.add_argument(
        "preset", nargs="?", help="Preset to load before running"
    )
    commands.add_parser("report", help="Show results of the latest run")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    project_dir: Path = args.project_dir.resolve()
    settings_path: Path = args.settings or project_dir / DEFAULT_SETTINGS_FILENAME
    console = Console()

    if args.command == "report":
        exit_code = asyncio.run(report(project_dir, settings_path, console))
    else:
        exit_code = asyncio.run(
            run(
                project_dir,
                settings_path,
                console,
                preset=args.preset,
                recorded=args.command == "run",
                stagger_interval=args.stagger,
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
