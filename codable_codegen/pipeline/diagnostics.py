"""
Generation-time errors and diagnostics.

Analysis raises ``CodableMacroError`` subclasses; the analyzer turns them into
``Diagnostic`` values positioned at the offending declaration or member.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A message reported against a source position."""

    severity: Severity
    message: str
    line: int = 0
    column: int = 0
    declaration: str | None = None

    def format(self, source_name: str = "<source>") -> str:
        where = f"{source_name}:{self.line}:{self.column}"
        subject = f" [{self.declaration}]" if self.declaration else ""
        return f"{where}: {self.severity.value}{subject}: {self.message}"


class CodableMacroError(Exception):
    """Base class for errors found while analyzing a declaration."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)


class UnsupportedDeclarationError(CodableMacroError):
    """The decorated declaration is not a record, reference type or sum type."""


class MalformedAttributeError(CodableMacroError):
    """A field marker could not be interpreted."""


class DuplicateCodingKeyError(MalformedAttributeError):
    """A field carries more than one key marker, or two fields share or overlap a wire key."""


class MissingTypeAnnotationError(CodableMacroError):
    """A stored field has no type annotation."""


class GenerationError(Exception):
    """Raised after generation when error diagnostics were reported."""

    def __init__(self, diagnostics: list[Diagnostic], source_name: str = "<source>"):
        self.diagnostics = diagnostics
        lines = "\n".join(d.format(source_name) for d in diagnostics)
        super().__init__(f"Code generation failed with {len(diagnostics)} error(s):\n{lines}")
