"""
Python AST backend.

Dispatches each analyzed declaration to its synthesizer and tracks the
imports the synthesized members need.
"""

from __future__ import annotations

import ast
import logging

from ..analyzer.ir_nodes import RecordIR, TransformInfo, VariantIR
from ..config import CodeGeneratorConfig
from . import builders as b
from .base import AstBackend
from .record_synthesizer import RecordSynthesizer
from .variant_synthesizer import VariantSynthesizer

logger = logging.getLogger(__name__)


class PythonAstBackend(AstBackend):
    """Synthesizes coding members as Python ``ast`` nodes."""

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.runtime_imports: set[str] = set()
        self.typing_imports: set[str] = set()
        self.needs_json_import = False

    def require(self, *names: str) -> None:
        """Record names imported from the runtime module."""
        self.runtime_imports.update(names)

    def require_typing(self, *names: str) -> None:
        self.typing_imports.update(names)

    def require_transform(self, transform: TransformInfo) -> None:
        # Custom transformers are resolved in the declaration module itself
        if transform.is_builtin:
            self.require(transform.transformer_type_name)

    def synthesize(self, declaration: RecordIR | VariantIR) -> list[ast.stmt]:
        if isinstance(declaration, RecordIR):
            members = RecordSynthesizer(self, declaration).members()
        elif isinstance(declaration, VariantIR):
            members = VariantSynthesizer(self, declaration).members()
        else:
            raise TypeError(f"Cannot synthesize {type(declaration).__name__}")
        logger.debug("Synthesized %d member(s) for %s", len(members), declaration.name)
        return members

    def generate_imports(self) -> list[ast.stmt]:
        nodes: list[ast.stmt] = []
        if self.needs_json_import:
            nodes.append(b.import_module("json"))
        if self.typing_imports:
            nodes.append(b.import_from("typing", sorted(self.typing_imports)))
        if self.runtime_imports:
            nodes.append(b.import_from(self.config.runtime_module, sorted(self.runtime_imports)))
        return nodes
