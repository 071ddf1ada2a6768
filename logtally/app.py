from __future__ import annotations

import io
import logging
import signal
import sys
import time
from typing import Any, Callable, Iterable

from rich.console import Console

from logtally.config.defaults import get_section
from logtally.config.manager import ConfigManager
from logtally.report.renderer import ReportOptions, ReportRenderer
from logtally.stream.engine import NO_INPUT_HINT, Engine, EngineLimits
from logtally.stream.extractor import KeyExtractor, parse_field_spec
from logtally.stream.pattern_matcher import PatternMatcher
from logtally.stream.scheduler import ReportScheduler
from logtally.utils.logger import setup_logging

log = logging.getLogger("logtally.app")


def _non_negative(name: str, value: Any, kind: Callable[[Any], Any]) -> Any:
    try:
        converted = kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if converted < 0:
        raise ValueError(f"{name} must not be negative, got {value!r}")
    return converted


class LogTallyApp:
    """Wires config, logging and the engine together for one run.

    Construction raises ``ValueError``/``re.error``/``OSError`` on bad
    configuration; nothing is read from the input until :meth:`run`.
    """

    def __init__(
        self,
        config_path: str | None = None,
        overrides: dict[str, dict] | None = None,
        verbose: bool = False,
        console: Console | None = None,
        usage: str = NO_INPUT_HINT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config_manager = ConfigManager(config_path)
        self.config = self._config_manager.apply_overrides(overrides or {})

        general = get_section(self.config, "general")
        log_level = "DEBUG" if verbose else str(general["log_level"])
        setup_logging(log_file=str(general["log_file"]), log_level=log_level)

        self.console = console or Console(
            markup=False, highlight=False, emoji=False, soft_wrap=True
        )
        self.engine = self._build_engine(usage, clock)

    def _build_engine(self, usage: str, clock: Callable[[], float]) -> Engine:
        match = get_section(self.config, "match")
        report = get_section(self.config, "report")
        limits = get_section(self.config, "limits")

        patterns = list(match["patterns"])
        matcher = PatternMatcher(
            patterns,
            exclude=match["exclude"] or None,
            case_sensitive=match["case_sensitive"],
            multi_match=match["multi_match"],
        )
        extractor = KeyExtractor(
            fields=parse_field_spec(match["fields"]),
            delimiter=match["delimiter"],
        )
        options = ReportOptions(
            width=_non_negative("width", report["width"], int),
            limit=_non_negative("limit", report["limit"], int),
            relative=report["relative"],
            show_rate=report["show_rate"],
            clear_screen=report["clear_screen"],
        )
        scheduler = ReportScheduler(
            line_frequency=_non_negative("line frequency", report["line_frequency"], int),
            time_frequency=_non_negative("time frequency", report["time_frequency"], float),
        )
        engine_limits = EngineLimits(
            max_keys=_non_negative("max keys", limits["max_keys"], int),
            max_time=_non_negative("max time", limits["max_time"], float),
            max_lines=_non_negative("max lines", limits["max_lines"], int),
        )
        log.debug(
            "Patterns=%r fields=%r exclude=%r limits=%r",
            patterns, extractor.fields, match["exclude"], engine_limits,
        )
        return Engine(
            matcher=matcher,
            renderer=ReportRenderer(self.console, options),
            extractor=extractor,
            scheduler=scheduler,
            limits=engine_limits,
            clock=clock,
            usage=usage,
        )

    def run(self, lines: Iterable[str] | None = None) -> int:
        if lines is None:
            lines = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace")

        def _on_signal(signum: int, frame: object) -> None:
            self.engine.interrupt()

        # SIGINT and SIGTERM share one finalize path.
        previous: dict[int, Any] = {}
        try:
            for sig in (signal.SIGINT, signal.SIGTERM):
                previous[sig] = signal.signal(sig, _on_signal)
        except ValueError:
            # Not the main thread; Python's default KeyboardInterrupt applies.
            pass

        try:
            result = self.engine.run(lines)
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
        return result.exit_code
