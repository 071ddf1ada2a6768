from __future__ import annotations

import logging
from enum import Enum

from .frequency import RunCounters

log = logging.getLogger(__name__)


class Trigger(Enum):
    LINES = "lines"
    TIME = "time"


class ReportScheduler:
    """Two uncoupled report clocks: every N lines and every T seconds.

    The line clock counts lines since the last report of either kind.  The
    time clock keeps its own timestamp and ignores line-triggered reports.
    A value of 0 disables that clock.
    """

    def __init__(self, line_frequency: int = 0, time_frequency: float = 1.0) -> None:
        self.line_frequency = line_frequency
        self.time_frequency = time_frequency

    def due(self, counters: RunCounters, now: float) -> list[Trigger]:
        fired: list[Trigger] = []

        if self.line_frequency > 0 and counters.lines_since_report >= self.line_frequency:
            fired.append(Trigger.LINES)
            counters.lines_since_report = 0

        if self.time_frequency > 0 and now - counters.last_time_report >= self.time_frequency:
            fired.append(Trigger.TIME)
            counters.last_time_report = now
            counters.lines_since_report = 0

        if fired:
            log.debug("Report due: %s", ", ".join(t.value for t in fired))
        return fired
