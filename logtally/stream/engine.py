from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from logtally.report.renderer import ReportRenderer, ReportSnapshot

from .extractor import KeyExtractor
from .frequency import FrequencyTable, RunCounters
from .pattern_matcher import PatternMatcher
from .scheduler import ReportScheduler
from .state import (
    LIMIT_CAUSES,
    EngineState,
    TerminationCause,
    is_valid_engine_transition,
)

log = logging.getLogger(__name__)

NO_INPUT_HINT = (
    "No input received. Pipe lines into logtally, for example:\n"
    "  tail -f access.log | logtally 'GET (\\S+)'"
)


@dataclass(frozen=True)
class EngineLimits:
    max_keys: int = 50000
    max_time: float = 0.0
    max_lines: int = 0


@dataclass(frozen=True)
class RunResult:
    cause: TerminationCause
    exit_code: int
    reported: bool


def strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


class Engine:
    """Pulls lines, counts keys, and reports until a stop condition hits.

    The engine is the only writer of its :class:`FrequencyTable` and
    :class:`RunCounters`; the renderer only ever sees a
    :class:`ReportSnapshot`.
    """

    def __init__(
        self,
        matcher: PatternMatcher,
        renderer: ReportRenderer,
        extractor: KeyExtractor | None = None,
        scheduler: ReportScheduler | None = None,
        limits: EngineLimits | None = None,
        clock: Callable[[], float] = time.monotonic,
        usage: str = NO_INPUT_HINT,
    ) -> None:
        self.matcher = matcher
        self.renderer = renderer
        self.extractor = extractor or KeyExtractor()
        self.scheduler = scheduler or ReportScheduler()
        self.limits = limits or EngineLimits()
        self.usage = usage
        self._clock = clock

        self.table = FrequencyTable()
        self.counters = RunCounters(start_time=clock())
        self.state = EngineState.RUNNING
        self._stop_requested = False
        self._reading = False
        self._result: RunResult | None = None

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------

    def run(self, lines: Iterable[str]) -> RunResult:
        source = iter(lines)
        cause: TerminationCause | None = None
        try:
            while cause is None:
                cause = self.check_termination()
                if cause is not None:
                    break
                self._reading = True
                try:
                    line = next(source)
                except StopIteration:
                    cause = TerminationCause.END_OF_STREAM
                    break
                finally:
                    self._reading = False
                self.process_line(line)
                self._report_if_due()
        except KeyboardInterrupt:
            cause = TerminationCause.INTERRUPTED
        return self.finalize(cause)

    def stop(self) -> None:
        """Ask the loop to finish before it takes the next line."""
        self._stop_requested = True

    def interrupt(self) -> None:
        """Signal-handler entry point.

        Only a loop blocked on the line source is broken out of at once;
        anywhere else the stop flag is picked up at the next limit check, so
        a line is never half counted.
        """
        self._stop_requested = True
        if self._reading:
            raise KeyboardInterrupt

    def check_termination(self) -> TerminationCause | None:
        limits = self.limits
        if limits.max_keys > 0 and len(self.table) > limits.max_keys:
            return TerminationCause.MAX_KEYS
        if limits.max_time > 0 and self.elapsed() >= limits.max_time:
            return TerminationCause.MAX_TIME
        # Taking one more line would exceed max_lines, so exactly max_lines
        # lines are processed.
        if limits.max_lines > 0 and self.counters.total_lines >= limits.max_lines:
            return TerminationCause.MAX_LINES
        if self._stop_requested:
            return TerminationCause.INTERRUPTED
        return None

    def process_line(self, line: str) -> bool:
        """Count one line.  Returns True when it produced at least one hit."""
        subject = self.extractor(strip_terminator(line))
        excluded = self.matcher.is_excluded(subject)
        outcomes = [] if excluded else self.matcher.classify(subject)

        # Counters and table change together, after all matching is done.
        counters = self.counters
        counters.total_lines += 1
        counters.lines_since_report += 1
        for outcome in outcomes:
            counters.hitcount += 1
            self.table.increment(outcome.key)
        if not outcomes:
            counters.restcount += 1
        return bool(outcomes)

    def _report_if_due(self) -> None:
        for _trigger in self.scheduler.due(self.counters, self._clock()):
            self.renderer.render(self.snapshot())

    # ------------------------------------------------------------------
    # Reporting and shutdown
    # ------------------------------------------------------------------

    def elapsed(self) -> float:
        return self._clock() - self.counters.start_time

    def snapshot(self) -> ReportSnapshot:
        c = self.counters
        return ReportSnapshot(
            total_lines=c.total_lines,
            hitcount=c.hitcount,
            restcount=c.restcount,
            start_time=c.start_time,
            now=self._clock(),
            items=self.table.snapshot(),
        )

    def summary_line(self) -> str:
        elapsed = self.elapsed()
        lines = self.counters.total_lines
        per_sec = lines / elapsed if round(elapsed, 2) > 0 else 0.0
        return f"Parsed {lines} lines in {elapsed:.2f} seconds ({per_sec:.2f} lines/s)"

    def cause_message(self, cause: TerminationCause) -> str:
        limits = self.limits
        if cause is TerminationCause.MAX_KEYS:
            return f"Maximum number of keys ({limits.max_keys}) exceeded, stopping"
        if cause is TerminationCause.MAX_TIME:
            return f"Maximum run time ({limits.max_time:g} seconds) reached, stopping"
        if cause is TerminationCause.MAX_LINES:
            return f"Maximum number of lines ({limits.max_lines}) reached, stopping"
        return ""

    def finalize(self, cause: TerminationCause) -> RunResult:
        """Emit the final report once; later calls return the first result."""
        if self._result is not None:
            return self._result

        self._transition(EngineState.TERMINATING)
        log.info(
            "Stopping (%s) after %d lines, %d keys",
            cause.value, self.counters.total_lines, len(self.table),
        )
        console = self.renderer.console

        if cause is TerminationCause.END_OF_STREAM and self.counters.total_lines == 0:
            console.print(self.usage)
            self._result = RunResult(cause=cause, exit_code=1, reported=False)
        else:
            if cause in LIMIT_CAUSES:
                console.print(self.cause_message(cause))
            self.renderer.render(self.snapshot())
            console.print(self.summary_line())
            self._result = RunResult(cause=cause, exit_code=0, reported=True)

        self._transition(EngineState.DONE)
        return self._result

    def _transition(self, target: EngineState) -> None:
        if not is_valid_engine_transition(self.state, target):
            raise RuntimeError(
                f"Invalid engine transition {self.state.value} -> {target.value}"
            )
        log.debug("Engine %s -> %s", self.state.value, target.value)
        self.state = target
