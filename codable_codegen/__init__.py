"""codable_codegen

Generates encode/decode, memberwise initializers and dictionary bridging for
classes declared with ``@codable``. Declarations are plain Python classes;
the generator expands them with ``ast`` into a self-contained module that
depends only on ``codable_codegen.runtime``.
"""

__version__ = "1.0.0"

from .markers import CodingTransformer, codable, coding_ignored, coding_key
from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    Diagnostic,
    FormatterConfig,
    GenerationError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
)
from .runtime import Case, Codable, Variant

__all__ = [
    "AtomicWriter",
    "Case",
    "Codable",
    "CodeGeneratorConfig",
    "CodingTransformer",
    "Diagnostic",
    "FormatterConfig",
    "GenerationError",
    "OutputConfig",
    "OutputMode",
    "PipelineGenerator",
    "Variant",
    "codable",
    "coding_ignored",
    "coding_key",
]
