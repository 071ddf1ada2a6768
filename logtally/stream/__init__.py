from __future__ import annotations

from .state import EngineState, TerminationCause
from .extractor import KeyExtractor, extract_subject, parse_field_spec
from .pattern_matcher import KeyOutcome, PatternMatcher
from .frequency import FrequencyTable, RunCounters
from .scheduler import ReportScheduler, Trigger
from .engine import Engine, EngineLimits, RunResult

__all__ = [
    "EngineState",
    "TerminationCause",
    "KeyExtractor",
    "extract_subject",
    "parse_field_spec",
    "KeyOutcome",
    "PatternMatcher",
    "FrequencyTable",
    "RunCounters",
    "ReportScheduler",
    "Trigger",
    "Engine",
    "EngineLimits",
    "RunResult",
]
