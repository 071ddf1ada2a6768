from __future__ import annotations

import logging

log = logging.getLogger(__name__)

DEFAULT_DELIMITER = r"\s+"


def get_section(config: dict, name: str) -> dict:
    """Return the ``[name]`` table with defaults filled in.

    Unknown keys are dropped with a warning so a typo in the config file
    does not silently change behaviour.  A value whose type differs from
    the default's raises ``ValueError``.
    """
    defaults = DEFAULT_CONFIG[name]
    section = config.get(name, {})
    result = dict(defaults)
    for key, value in section.items():
        if key not in defaults:
            log.warning("Unknown %s setting %r", name, key)
            continue
        _check_type(f"{name}.{key}", value, defaults[key])
        result[key] = value
    return result


def _check_type(label: str, value: object, default: object) -> None:
    if isinstance(default, bool):
        ok = isinstance(value, bool)
        expected = "true or false"
    elif isinstance(default, int):
        ok = isinstance(value, int) and not isinstance(value, bool)
        expected = "an integer"
    elif isinstance(default, float):
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        expected = "a number"
    elif isinstance(default, list):
        ok = isinstance(value, list) and all(isinstance(v, str) for v in value)
        expected = "a list of strings"
    else:
        ok = isinstance(value, str)
        expected = "a string"
    if not ok:
        raise ValueError(f"{label} must be {expected}, got {value!r}")


DEFAULT_CONFIG: dict = {
    "general": {
        "log_file": "",
        "log_level": "INFO",
    },
    "match": {
        "patterns": [],
        "fields": "",
        "delimiter": DEFAULT_DELIMITER,
        "exclude": "",
        "case_sensitive": False,
        "multi_match": False,
    },
    "report": {
        "relative": False,
        "width": 30,
        "limit": 0,
        "line_frequency": 0,
        "time_frequency": 1.0,
        "show_rate": True,
        "clear_screen": False,
    },
    "limits": {
        "max_keys": 50000,
        "max_time": 0.0,
        "max_lines": 0,
    },
}
