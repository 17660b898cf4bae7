"""
Output writing for expanded modules.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, OutputValidationError

__all__ = [
    "AtomicWriter",
    "OutputValidationError",
]
