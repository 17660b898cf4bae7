"""
Pipeline generator.

Runs the phases end to end:

1. Parser: collect ``@codable`` declarations from the source module
2. Analyzer: resolve each declaration into IR and collect diagnostics
3. AST backend: synthesize the coding members as ``ast`` nodes
4. Expansion: splice members into the class bodies, add bases and imports
5. Serializer: ``ast.unparse`` plus the generation comment
6. Formatter: optional black / ruff post-processing
"""

from __future__ import annotations

import ast
import logging
from pathlib import Path

import jinja2

from .analyzer import DeclarationAnalyzer, RecordIR, VariantClassification, VariantIR
from .ast_backends import PythonAstBackend
from .ast_backends import builders as b
from .config import CodeGeneratorConfig
from .declaration_ast import DeclarationNode, DeclarationParser, simple_name
from .diagnostics import Diagnostic, GenerationError, Severity
from .formatters import get_formatter

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


class PipelineGenerator:
    """Expands every ``@codable`` declaration of one source module."""

    def __init__(
        self,
        source: str,
        config: CodeGeneratorConfig | None = None,
        source_name: str = "<source>",
        command_line: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            source: Declaration module source text
            config: Generation options (defaults to CodeGeneratorConfig())
            source_name: Name used in diagnostics and the generation comment
            command_line: Command recorded in the generation comment
        """
        self.source = source
        self.config = config or CodeGeneratorConfig()
        self.source_name = source_name
        self.command_line = command_line
        self.diagnostics: list[Diagnostic] = []

        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    def generate(self) -> str:
        """
        Generate the expanded module.

        Returns:
            Expanded module source text

        Raises:
            SyntaxError: If the source is not valid Python
            GenerationError: If a declaration failed and ``config.fail_on_error`` is set
        """
        module = DeclarationParser().parse(self.source, self.source_name)
        analysis = DeclarationAnalyzer().analyze(module)
        self.diagnostics = analysis.diagnostics

        if self.errors and self.config.fail_on_error:
            raise GenerationError(self.errors, self.source_name)

        backend = PythonAstBackend(self.config)
        for declaration, analyzed in analysis.analyzed:
            self._expand(declaration, analyzed, backend)

        self._insert_imports(module.tree, backend.generate_imports())
        ast.fix_missing_locations(module.tree)
        code = ast.unparse(module.tree) + "\n"
        logger.info("Expanded %d declaration(s) from %s", len(analysis.analyzed), self.source_name)

        code = self._post_process_code(code)

        formatter = get_formatter(self.config.formatter)
        if formatter is not None:
            code = formatter.format(code, self.config.formatter)
        return code

    def _expand(self, declaration: DeclarationNode, analyzed: RecordIR | VariantIR, backend: PythonAstBackend) -> None:
        node = declaration.node
        node.decorator_list = [d for d in node.decorator_list if d is not declaration.marker]

        if isinstance(analyzed, VariantIR) and analyzed.classification is VariantClassification.RAW_REPRESENTABLE:
            return

        if self.config.add_codable_base:
            self._add_bases(node, analyzed, backend)

        members = backend.synthesize(analyzed)
        if members:
            node.body = [s for s in node.body if not isinstance(s, ast.Pass)] + members

    @staticmethod
    def _add_bases(node: ast.ClassDef, analyzed: RecordIR | VariantIR, backend: PythonAstBackend) -> None:
        base_names = {simple_name(base) for base in node.bases}
        is_enum = isinstance(analyzed, VariantIR) and analyzed.is_enum

        if isinstance(analyzed, VariantIR) and not is_enum and "Variant" not in base_names:
            backend.require("Variant")
            node.bases.append(b.name("Variant"))

        if "Codable" not in base_names:
            backend.require("Codable")
            # Enum requires mixins to precede the Enum base
            if is_enum:
                node.bases.insert(0, b.name("Codable"))
            else:
                node.bases.append(b.name("Codable"))

    @staticmethod
    def _insert_imports(tree: ast.Module, imports: list[ast.stmt]) -> None:
        index = 0
        body = tree.body
        if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
            if isinstance(body[0].value.value, str):
                index = 1
        while index < len(body) and isinstance(body[index], ast.ImportFrom) and body[index].module == "__future__":
            index += 1
        body[index:index] = imports

    def _post_process_code(self, code: str) -> str:
        if not self.config.add_generation_comment:
            return code
        template = self.jinja_env.get_template("generation_comment.py.jinja2")
        comment = template.render(source_name=self.source_name, command_line=self.command_line)
        return comment + "\n" + code
