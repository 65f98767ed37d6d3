from __future__ import annotations

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from latencylens.contracts import Reporter
from latencylens.models import BucketCount, HistogramSummary

_BAR_WIDTH = 30


class RichReporter(Reporter):
    """Render histogram summaries using Rich tables."""

    def __init__(
        self, console: Console | None = None, *, hide_empty: bool = False
    ) -> None:
        self._console = console or Console()
        self._hide_empty = hide_empty

    def render(self, summary: HistogramSummary, name: str) -> None:
        self._console.print()
        self._console.print(f"Histogram {name}", style="bold underline")
        self._console.print(Rule(style="dim"))
        self._console.print(self._build_summary_section(summary))
        self._console.print()

        self._render_buckets(summary)

    @staticmethod
    def _build_summary_section(summary: HistogramSummary) -> Table:
        table = Table.grid(padding=(0, 3))
        table.add_column("Metric", style="bold cyan")
        table.add_column("Value")

        table.add_row("count:", f"{summary.count:,}")
        table.add_row("min:", "n/a" if summary.min is None else f"{summary.min:,}")
        table.add_row("max:", f"{summary.max:,}")
        table.add_row("mean:", f"{summary.mean:.2f}")
        table.add_row("99%:", f"{summary.two_nines:,}")
        table.add_row("99.99%:", f"{summary.four_nines:,}")
        return table

    def _render_buckets(self, summary: HistogramSummary) -> None:
        buckets: list[BucketCount] = [
            bucket
            for bucket in summary.buckets
            if bucket.count or not self._hide_empty
        ]

        self._console.print(f"Buckets ({len(buckets)})", style="bold")
        self._console.print(Rule(style="dim"))

        if not buckets:
            self._console.print("[dim]None[/dim]")
            return

        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold",
            padding=(0, 2),
        )
        table.add_column("Upper bound", justify="right")
        table.add_column("Count", justify="right")
        table.add_column("Share", justify="right")
        table.add_column("")

        peak = max(bucket.count for bucket in buckets)
        for bucket in buckets:
            share = bucket.count / summary.count if summary.count else 0.0
            width = round(_BAR_WIDTH * bucket.count / peak) if peak else 0
            table.add_row(
                f"{bucket.upper_bound:,}",
                f"{bucket.count:,}",
                f"{share:.2%}",
                Text("#" * width, style="green"),
            )
        self._console.print(table)
