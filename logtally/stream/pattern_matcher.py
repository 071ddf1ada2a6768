from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class KeyOutcome:
    """One counted match event.

    ``captured`` is True when the key came from capture group 1, False when
    the matcher's pattern text (or the whole subject) is used instead.
    """

    key: str
    captured: bool


class PatternMatcher:
    def __init__(
        self,
        patterns: list[str],
        exclude: str | None = None,
        case_sensitive: bool = False,
        multi_match: bool = False,
    ) -> None:
        flags = 0 if case_sensitive else re.IGNORECASE
        # Compile once, in command-line order.  Invalid regexes raise re.error.
        self._compiled: list[tuple[str, re.Pattern[str]]] = [
            (p, re.compile(p, flags)) for p in patterns
        ]
        self._exclude: re.Pattern[str] | None = (
            re.compile(exclude, flags) if exclude else None
        )
        self.multi_match = multi_match

    @property
    def patterns(self) -> list[str]:
        return [p for p, _ in self._compiled]

    def is_excluded(self, subject: str) -> bool:
        return self._exclude is not None and self._exclude.search(subject) is not None

    def classify(self, subject: str) -> list[KeyOutcome]:
        if not self._compiled:
            return [KeyOutcome(key=subject, captured=False)]

        outcomes: list[KeyOutcome] = []
        for pattern, rx in self._compiled:
            if self.multi_match:
                for m in rx.finditer(subject):
                    outcomes.append(_outcome(pattern, rx, m))
            else:
                m = rx.search(subject)
                if m:
                    outcomes.append(_outcome(pattern, rx, m))
        return outcomes


def _outcome(pattern: str, rx: re.Pattern[str], m: re.Match[str]) -> KeyOutcome:
    # A group that took part in the match is used even when it captured "";
    # only a non-participating group falls back to the pattern text.
    if rx.groups and m.group(1) is not None:
        return KeyOutcome(key=m.group(1), captured=True)
    return KeyOutcome(key=pattern, captured=False)
