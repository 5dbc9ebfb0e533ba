"""Render aggregated results as a grouped table."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeAlias

from rich.console import Console
from rich.table import Table
from rich.text import Text

from parallel_cli.models.result import BrowserResults, ResultsReport
from parallel_cli.models.run import BrowserPass

HEADER = ("Browser", "Spec", "Date", "Tests", "Passed", "Failed", "Duration")
TOTALS_LABEL = "Totals"
COLUMN_STYLES = ("bold cyan", "bold white", "", "cyan", "green", "red", "yellow")

Cell: TypeAlias = str | int


@dataclass(frozen=True, kw_only=True)
class Span:
    """A merged cell region; ``row`` indexes the body rows (header excluded)."""

    row: int
    col: int
    row_span: int = 1
    col_span: int = 1


@dataclass(frozen=True, kw_only=True)
class RenderedTable:
    """Table contents before styling: body rows plus merged cell regions."""

    header: Sequence[str]
    rows: Sequence[Sequence[Cell]]
    spans: Sequence[Span]


def build_table(report: ResultsReport) -> RenderedTable:
    """Lay out one detail row per record and a totals row per browser.

    Each browser group gets a vertical span over its detail rows in the
    browser column and a horizontal span over the first three columns of
    its totals row.
    """
    rows: list[Sequence[Cell]] = []
    spans: list[Span] = []

    for group in report.groups:
        start = len(rows)
        rows.extend(_detail_rows(group))
        if group.records:
            spans.append(Span(row=start, col=0, row_span=len(group.records)))

        totals = group.totals
        spans.append(Span(row=len(rows), col=0, col_span=3))
        rows.append(
            (
                TOTALS_LABEL,
                "",
                "",
                totals.tests,
                totals.passes,
                totals.failures,
                totals.duration,
            )
        )

    return RenderedTable(header=HEADER, rows=rows, spans=spans)


def format_timestamp(value: datetime) -> str:
    """Millisecond ISO 8601 text, with a trailing Z for UTC as in result files."""
    text = value.isoformat(timespec="milliseconds")
    if value.utcoffset() == timedelta(0):
        return text.removesuffix("+00:00") + "Z"
    return text


def _detail_rows(group: BrowserResults) -> list[Sequence[Cell]]:
    return [
        (
            group.browser,
            record.spec_file,
            format_timestamp(record.start_timestamp),
            record.test_count,
            record.pass_count,
            record.fail_count,
            record.duration_ms,
        )
        for record in group.records
    ]


def to_rich_table(table: RenderedTable) -> Table:
    """Convert to a rich Table; spanned cells are shown once and left blank after."""
    rich_table = Table(show_header=True, header_style="bold green", show_lines=False)
    for index, title in enumerate(table.header):
        rich_table.add_column(title, justify="center" if index == 0 else "left")

    covered: set[tuple[int, int]] = set()
    section_ends: set[int] = set()
    for span in table.spans:
        for r in range(span.row, span.row + span.row_span):
            for c in range(span.col, span.col + span.col_span):
                if (r, c) != (span.row, span.col):
                    covered.add((r, c))
        if span.col_span > 1:
            section_ends.add(span.row)

    for row_index, row in enumerate(table.rows):
        cells = [
            Text("" if (row_index, col) in covered else str(value), style=style)
            for col, (value, style) in enumerate(zip(row, COLUMN_STYLES, strict=True))
        ]
        rich_table.add_row(*cells, end_section=row_index in section_ends)

    return rich_table


def render_report(
    console: Console,
    report: ResultsReport,
    dashboard_url: str | None = None,
    passes: Sequence[BrowserPass] = (),
) -> None:
    """Print the results table, missing-result warnings and dashboard link."""
    console.print()
    console.print(to_rich_table(build_table(report)))

    for browser_pass in passes:
        if browser_pass.skipped:
            console.print(
                f"[bold red]{browser_pass.browser}: "
                "no specs found, pass skipped[/bold red]"
            )
        elif browser_pass.missing:
            console.print(
                f"[bold yellow]{browser_pass.browser}: {browser_pass.missing} spec(s) "
                f"produced no result record (expected {browser_pass.expected}, "
                f"observed {browser_pass.observed})[/bold yellow]"
            )

    if dashboard_url:
        console.print(
            f"[bold blue]Dashboard record (click link to navigate):[/bold blue] "
            f"[bold white]{dashboard_url}[/bold white]"
        )
