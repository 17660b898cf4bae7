"""
Base class for AST-based code synthesis backends.
"""

from __future__ import annotations

import ast
from abc import ABC, abstractmethod

from ..analyzer.ir_nodes import RecordIR, VariantIR
from ..config import CodeGeneratorConfig


class AstBackend(ABC):
    """Abstract base class for code synthesis backends."""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config

    @abstractmethod
    def synthesize(self, declaration: RecordIR | VariantIR) -> list[ast.stmt]:
        """
        Synthesize the members added to a declaration's class body.

        Args:
            declaration: The analyzed declaration

        Returns:
            Statements to append to the class body (empty when nothing is generated)
        """

    @abstractmethod
    def generate_imports(self) -> list[ast.stmt]:
        """Import statements needed by everything synthesized so far."""
