from __future__ import annotations

import re

from logtally.config.defaults import DEFAULT_DELIMITER

_DEFAULT_SPLIT = re.compile(DEFAULT_DELIMITER)


def parse_field_spec(text: str) -> tuple[int, ...]:
    """Parse ``"2,1,5"`` into 1-based field indices.

    Blank input selects the whole line.  Raises ``ValueError`` on anything
    that is not a positive integer.
    """
    if not text or not text.strip():
        return ()
    fields: list[int] = []
    for part in text.split(","):
        part = part.strip()
        try:
            index = int(part)
        except ValueError:
            raise ValueError(f"invalid field index {part!r}") from None
        if index < 1:
            raise ValueError(f"field index must be 1 or greater, got {index}")
        fields.append(index)
    return tuple(fields)


def extract_subject(
    line: str,
    fields: tuple[int, ...],
    delimiter: re.Pattern[str] = _DEFAULT_SPLIT,
) -> str:
    if not fields:
        return line
    parts = delimiter.split(line)
    # Out-of-range fields contribute an empty string rather than failing.
    return " ".join(
        parts[i - 1] if i <= len(parts) else ""
        for i in fields
    )


class KeyExtractor:
    def __init__(self, fields: tuple[int, ...] = (), delimiter: str = DEFAULT_DELIMITER) -> None:
        self.fields = fields
        self._delimiter = re.compile(delimiter)

    def __call__(self, line: str) -> str:
        return extract_subject(line, self.fields, self._delimiter)
