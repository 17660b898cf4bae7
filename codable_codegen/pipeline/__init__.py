"""
Declaration-to-code pipeline.

1. Parser: collect ``@codable`` declarations (``declaration_ast``)
2. Analyzer: field extraction, transforms, variants, nested paths, visibility
3. AST backend: synthesize key enums, initializers, coding and bridging routines
4. Expansion, formatting and atomic output
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .diagnostics import (
    CodableMacroError,
    Diagnostic,
    DuplicateCodingKeyError,
    GenerationError,
    MalformedAttributeError,
    MissingTypeAnnotationError,
    Severity,
    UnsupportedDeclarationError,
)
from .generator import PipelineGenerator
from .writer import AtomicWriter, OutputValidationError

__all__ = [
    "AtomicWriter",
    "CodableMacroError",
    "CodeGeneratorConfig",
    "Diagnostic",
    "DuplicateCodingKeyError",
    "FormatterConfig",
    "GenerationError",
    "MalformedAttributeError",
    "MissingTypeAnnotationError",
    "OutputConfig",
    "OutputMode",
    "OutputValidationError",
    "PipelineGenerator",
    "Severity",
    "UnsupportedDeclarationError",
]
