"""
Post-processing formatters for expanded modules.
"""

from __future__ import annotations

from ..config import FormatterConfig
from .base import Formatter
from .black_formatter import BlackFormatter
from .ruff_formatter import RuffFormatter

_FORMATTERS: dict[str, type[Formatter]] = {
    "black": BlackFormatter,
    "ruff": RuffFormatter,
}


def get_formatter(config: FormatterConfig) -> Formatter | None:
    """Return the formatter selected by ``config``, or None when formatting is disabled."""
    if not config.enabled:
        return None
    try:
        return _FORMATTERS[config.tool]()
    except KeyError:
        raise ValueError(f"Unknown formatter: {config.tool!r} (expected one of {sorted(_FORMATTERS)})") from None


__all__ = [
    "BlackFormatter",
    "Formatter",
    "RuffFormatter",
    "get_formatter",
]
