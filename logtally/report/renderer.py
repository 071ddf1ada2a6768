from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rich.console import Console

log = logging.getLogger(__name__)

LIMITED_KEY = "<limited>"
TOTAL_KEY = "<total>"
REST_KEY = "<rest>"


@dataclass(frozen=True)
class ReportOptions:
    width: int = 30
    limit: int = 0
    relative: bool = False
    show_rate: bool = True
    clear_screen: bool = False


@dataclass(frozen=True)
class ReportSnapshot:
    """Point-in-time copy of the table and counters handed to the renderer."""

    total_lines: int
    hitcount: int
    restcount: int
    start_time: float
    now: float
    items: list[tuple[str, int]] = field(default_factory=list)

    @property
    def elapsed(self) -> float:
        return self.now - self.start_time


def percentage(count: int, divider: int) -> float:
    if divider <= 0:
        return 0.0
    return count / divider * 100


def rate(count: int, elapsed: float) -> float | None:
    """Hits per second, or None while no time has passed."""
    if elapsed <= 0:
        return None
    return count / elapsed


class ReportRenderer:
    def __init__(self, console: Console, options: ReportOptions | None = None) -> None:
        self.console = console
        self.options = options or ReportOptions()

    def divider(self, snapshot: ReportSnapshot) -> int:
        if self.options.relative:
            return snapshot.hitcount
        return snapshot.total_lines

    def build(self, snapshot: ReportSnapshot) -> list[str]:
        opts = self.options
        divider = self.divider(snapshot)
        elapsed = snapshot.elapsed

        # sorted() is stable, so equal counts keep insertion order.
        ranked = sorted(snapshot.items, key=lambda kv: kv[1], reverse=True)
        if opts.limit > 0:
            shown, hidden = ranked[: opts.limit], ranked[opts.limit :]
        else:
            shown, hidden = ranked, []

        lines = [
            self._row(key, count, divider, elapsed, snapshot.total_lines)
            for key, count in shown
        ]
        if hidden:
            lines.append(
                self._row(
                    LIMITED_KEY,
                    sum(count for _, count in hidden),
                    divider,
                    elapsed,
                    snapshot.total_lines,
                    suffix=f" ({len(hidden)} keys)",
                )
            )
        lines.append(
            self._row(TOTAL_KEY, snapshot.hitcount, divider, elapsed, snapshot.total_lines)
        )
        if snapshot.restcount > 0:
            lines.append(
                self._row(REST_KEY, snapshot.restcount, divider, elapsed, snapshot.total_lines)
            )
        lines.append("")
        return lines

    def render(self, snapshot: ReportSnapshot) -> None:
        if self.options.clear_screen:
            self.console.clear()
        # Written as-is: Console.print would expand tabs and drop control
        # characters inside keys.
        out = self.console.file
        out.write("\n".join(self.build(snapshot)) + "\n")
        out.flush()

    def _row(
        self,
        key: str,
        count: int,
        divider: int,
        elapsed: float,
        total_lines: int,
        suffix: str = "",
    ) -> str:
        # Long keys push the columns right; they are never cut.
        cols = [key.ljust(self.options.width), f"{percentage(count, divider):7.2f}%"]
        if self.options.show_rate:
            per_sec = rate(count, elapsed)
            rate_text = "-" if per_sec is None else f"{per_sec:.2f}"
            cols.append(f"{rate_text:>10}/s")
        cols.append(f"{count:>10}")
        cols.append(str(total_lines))
        return " ".join(cols) + suffix
