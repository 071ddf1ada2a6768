from __future__ import annotations

import re

import pytest

from logtally.stream.pattern_matcher import KeyOutcome, PatternMatcher


def _matcher(*patterns: str, **kwargs: object) -> PatternMatcher:
    return PatternMatcher(list(patterns), **kwargs)  # type: ignore[arg-type]


def _keys(outcomes: list[KeyOutcome]) -> list[str]:
    return [o.key for o in outcomes]


# ── No matchers ───────────────────────────────────────────────────


def test_no_patterns_uses_subject_as_key() -> None:
    outcomes = _matcher().classify("GET /index.html")
    assert outcomes == [KeyOutcome(key="GET /index.html", captured=False)]


def test_no_patterns_empty_line_is_still_a_key() -> None:
    assert _keys(_matcher().classify("")) == [""]


# ── Key derivation ────────────────────────────────────────────────


def test_capture_group_becomes_key() -> None:
    outcomes = _matcher(r"(jpe?g)").classify("a.jpeg")
    assert outcomes == [KeyOutcome(key="jpeg", captured=True)]


def test_pattern_text_is_key_without_group() -> None:
    assert _keys(_matcher(r"jpe?g").classify("a.JPG")) == ["jpe?g"]


def test_non_participating_group_falls_back_to_pattern() -> None:
    outcomes = _matcher(r"x|(y)").classify("x")
    assert outcomes == [KeyOutcome(key="x|(y)", captured=False)]


def test_empty_capture_is_empty_key() -> None:
    outcomes = _matcher(r"a(b*)c").classify("ac")
    assert outcomes == [KeyOutcome(key="", captured=True)]


# ── Single vs multi match ─────────────────────────────────────────


def test_single_match_counts_once_per_matcher() -> None:
    assert _keys(_matcher(r"(\d+)").classify("1 2 3")) == ["1"]


def test_multi_match_counts_every_occurrence() -> None:
    outcomes = _matcher(r"(\d+)", multi_match=True).classify("1 2 3")
    assert _keys(outcomes) == ["1", "2", "3"]


def test_multiple_matchers_each_contribute_in_order() -> None:
    m = _matcher(r"(GET|POST)", r"(\d{3})$")
    assert _keys(m.classify("GET /a 404")) == ["GET", "404"]


def test_multi_match_across_matchers() -> None:
    m = _matcher(r"a", r"(b)", multi_match=True)
    assert _keys(m.classify("abab")) == ["a", "a", "b", "b"]


def test_no_match_returns_empty() -> None:
    assert _matcher(r"(jpe?g)").classify("b.png") == []


# ── Case sensitivity ──────────────────────────────────────────────


def test_case_insensitive_by_default() -> None:
    assert _keys(_matcher(r"(error)").classify("ERROR: boom")) == ["ERROR"]


def test_case_sensitive_flag() -> None:
    m = _matcher(r"(error)", case_sensitive=True)
    assert m.classify("ERROR: boom") == []
    assert _keys(m.classify("error: boom")) == ["error"]


# ── Exclusion ─────────────────────────────────────────────────────


def test_exclusion_uses_search() -> None:
    m = _matcher(r"(jpe?g)", exclude="gift")
    assert m.is_excluded("x.jpeg gift")
    assert not m.is_excluded("x.jpeg")


def test_exclusion_follows_case_mode() -> None:
    assert _matcher(exclude="gift").is_excluded("GIFT card")
    assert not _matcher(exclude="gift", case_sensitive=True).is_excluded("GIFT card")


def test_no_exclusion_never_excludes() -> None:
    assert not _matcher().is_excluded("anything")


# ── Errors ────────────────────────────────────────────────────────


def test_invalid_pattern_raises() -> None:
    with pytest.raises(re.error):
        _matcher(r"(unclosed")


def test_invalid_exclusion_raises() -> None:
    with pytest.raises(re.error):
        _matcher(exclude="[")


def test_patterns_property_keeps_order() -> None:
    assert _matcher("b", "a").patterns == ["b", "a"]
