"""
Base class for code formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Abstract base class for post-processing formatters."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format expanded module text.

        Args:
            code: The source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or ``code`` unchanged when formatting fails
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the formatter's tool is installed."""
