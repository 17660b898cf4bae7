"""
Declaration analysis: field extraction, transforms, variants, nested paths and visibility.
"""

from __future__ import annotations

from .analyzer import AnalysisResult, DeclarationAnalyzer
from .field_extractor import FieldExtractor, FieldModel
from .ir_nodes import (
    CaseParameter,
    DeclarationKind,
    Field,
    PathGroup,
    RecordIR,
    TransformInfo,
    VariantCase,
    VariantClassification,
    VariantIR,
    Visibility,
)
from .path_grouper import PathGrouper
from .transform_registry import TransformRegistry, TransformTemplate
from .variant_classifier import VariantClassifier
from .visibility import VisibilityResolver

__all__ = [
    "AnalysisResult",
    "CaseParameter",
    "DeclarationAnalyzer",
    "DeclarationKind",
    "Field",
    "FieldExtractor",
    "FieldModel",
    "PathGroup",
    "PathGrouper",
    "RecordIR",
    "TransformInfo",
    "TransformRegistry",
    "TransformTemplate",
    "VariantCase",
    "VariantClassification",
    "VariantClassifier",
    "VariantIR",
    "Visibility",
    "VisibilityResolver",
]
