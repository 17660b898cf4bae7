"""
Declaration analysis.

Phase 2 of the pipeline: resolve each decorated declaration once into a
tagged IR node and collect diagnostics. A failing declaration produces an
error diagnostic and no IR; the other declarations are unaffected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..declaration_ast import DeclarationForm, DeclarationNode, SourceModule
from ..diagnostics import CodableMacroError, Diagnostic, Severity, UnsupportedDeclarationError
from .field_extractor import FieldExtractor
from .ir_nodes import DeclarationKind, RecordIR, VariantClassification, VariantIR
from .path_grouper import PathGrouper
from .transform_registry import TransformRegistry
from .variant_classifier import VariantClassifier
from .visibility import VisibilityResolver

logger = logging.getLogger(__name__)

UNSUPPORTED_BASES = {"Protocol", "TypedDict", "NamedTuple"}

# Bases that do not make a class a reference type
MARKER_BASES = {"Codable", "object", "Generic"}

RAW_VALUE_WARNING = "Enum with raw value already conforms to Codable"


@dataclass
class AnalysisResult:
    """Analyzed declarations in source order, plus diagnostics."""

    analyzed: list[tuple[DeclarationNode, RecordIR | VariantIR]] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def get(self, name: str) -> RecordIR | VariantIR | None:
        for declaration, analyzed in self.analyzed:
            if declaration.name == name:
                return analyzed
        return None

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)


class DeclarationAnalyzer:
    """Analyzes every decorated declaration of a source module."""

    def __init__(self, registry: TransformRegistry | None = None):
        self.registry = registry or TransformRegistry.default()
        self.extractor = FieldExtractor(self.registry)
        self.classifier = VariantClassifier()
        self.grouper = PathGrouper()

    def analyze(self, module: SourceModule) -> AnalysisResult:
        result = AnalysisResult()
        visibility = VisibilityResolver(module.exported_names)

        for declaration in module.declarations:
            try:
                analyzed = self.analyze_declaration(declaration, visibility, result.diagnostics)
            except CodableMacroError as e:
                diagnostic = Diagnostic(
                    Severity.ERROR,
                    e.message,
                    e.line or declaration.line,
                    e.column if e.line else declaration.column,
                    declaration.name,
                )
                logger.debug("%s: %s", declaration.name, e.message)
                result.diagnostics.append(diagnostic)
                continue
            result.analyzed.append((declaration, analyzed))
        return result

    def analyze_declaration(
        self,
        declaration: DeclarationNode,
        visibility: VisibilityResolver,
        diagnostics: list[Diagnostic],
    ) -> RecordIR | VariantIR:
        """
        Resolve one declaration into its IR node.

        Args:
            declaration: The decorated declaration
            visibility: Access level resolver for the module
            diagnostics: Warnings are appended here

        Returns:
            RecordIR for records and reference types, VariantIR for sum types

        Raises:
            CodableMacroError: If the declaration cannot be expanded
        """
        kind = self.resolve_kind(declaration)
        access = visibility.resolve(declaration.name)

        if kind is DeclarationKind.SUM_TYPE:
            variant = self.classifier.classify(declaration, access)
            if variant.classification is VariantClassification.RAW_REPRESENTABLE:
                logger.debug("%s: %s", declaration.name, RAW_VALUE_WARNING)
                diagnostics.append(
                    Diagnostic(Severity.WARNING, RAW_VALUE_WARNING, declaration.line, declaration.column, declaration.name)
                )
            return variant

        model = self.extractor.extract(declaration)
        for warning in model.warnings:
            logger.debug("%s: %s", declaration.name, warning.message)
            diagnostics.append(
                Diagnostic(warning.severity, warning.message, warning.line, warning.column, declaration.name)
            )

        is_dataclass = any(d.rsplit(".", 1)[-1] == "dataclass" for d in declaration.decorators)
        return RecordIR(
            name=declaration.name,
            kind=kind,
            visibility=access,
            fields=model.fields,
            ignored_fields=model.ignored_fields,
            path_groups=self.grouper.group([f for f in model.fields if f.is_nested]),
            has_custom_init=declaration.defines("__init__") or is_dataclass,
            line=declaration.line,
            column=declaration.column,
        )

    def resolve_kind(self, declaration: DeclarationNode) -> DeclarationKind:
        if declaration.form is DeclarationForm.FUNCTION:
            raise UnsupportedDeclarationError(
                f"@codable is only applicable to a record or sum-type class, not the function '{declaration.name}'",
                declaration.line,
                declaration.column,
            )
        base_names = [b.rsplit(".", 1)[-1] for b in declaration.bases]
        unsupported = UNSUPPORTED_BASES.intersection(base_names)
        if unsupported:
            raise UnsupportedDeclarationError(
                f"@codable is only applicable to a record or sum-type class, not a {sorted(unsupported)[0]}",
                declaration.line,
                declaration.column,
            )
        if self.classifier.is_sum_type(declaration):
            return DeclarationKind.SUM_TYPE
        if any(name not in MARKER_BASES for name in base_names):
            return DeclarationKind.REFERENCE
        return DeclarationKind.RECORD
