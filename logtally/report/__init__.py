from __future__ import annotations

from .renderer import ReportOptions, ReportRenderer, ReportSnapshot

__all__ = [
    "ReportOptions",
    "ReportRenderer",
    "ReportSnapshot",
]
