# File: stormgen/__init__.py
"""
stormgen: Persistent Entity Schema Extraction & Validation
============================================================

Builds the validated model a DAO code generator needs from entity
declarations: one ``EntityModel`` per class marked as an entity, or a
list of diagnostics saying why it cannot be generated.

Architecture overview::

    ┌──────────────┐     ┌─────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ EntityProcessor │────▶│EntityModelBuilder│
    │   (cli.py)   │     │ (processor.py)  │     │   (builder.py)   │
    └──────────────┘     └─────────────────┘     └────────┬─────────┘
                                                          │
                              ┌────────────────┬──────────┴─────┐
                              ▼                ▼                ▼
                       ┌────────────┐   ┌────────────┐   ┌───────────┐
                       │ classifier │   │ databases  │   │diagnostics│
                       └─────┬──────┘   └────────────┘   └───────────┘
                             ▼
                       ┌────────────┐
                       │ converters │
                       └────────────┘

Usage::

    from stormgen import (
        DatabaseRegistry, DiagnosticsCollector, EntityModelBuilder,
        TypeConverterRegistry,
    )
    builder = EntityModelBuilder(TypeConverterRegistry.with_defaults(), databases)
    diagnostics = DiagnosticsCollector()
    model = builder.build(declaration, diagnostics)
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "Apache-2.0"

from stormgen.models import (
    BindType,
    ConverterDescriptor,
    DatabaseModel,
    EntityDeclaration,
    EntityModel,
    FieldDeclaration,
    FieldModel,
    Modifier,
    ProjectDeclaration,
    SqlType,
    TypeKind,
)
from stormgen.diagnostics import (
    Diagnostic,
    DiagnosticsCollector,
    DiagnosticsSink,
    ErrorKind,
    SourceLocation,
)
from stormgen.converters import (
    TypeConverterRegistry,
    UnsupportedTypeError,
    canonical_type_name,
)
from stormgen.databases import ConfigurationError, DatabaseRegistry
from stormgen.classifier import FieldClassification, FieldClassifier
from stormgen.builder import EntityModelBuilder
from stormgen.processor import (
    EntityProcessor,
    EntityResult,
    ProcessingReport,
    load_declaration_file,
    parse_declarations,
)

__all__: list[str] = [
    "__version__",
    "__license__",
    # Models
    "BindType",
    "ConverterDescriptor",
    "DatabaseModel",
    "EntityDeclaration",
    "EntityModel",
    "FieldDeclaration",
    "FieldModel",
    "Modifier",
    "ProjectDeclaration",
    "SqlType",
    "TypeKind",
    # Diagnostics
    "Diagnostic",
    "DiagnosticsCollector",
    "DiagnosticsSink",
    "ErrorKind",
    "SourceLocation",
    # Registries
    "TypeConverterRegistry",
    "UnsupportedTypeError",
    "canonical_type_name",
    "ConfigurationError",
    "DatabaseRegistry",
    # Core
    "FieldClassification",
    "FieldClassifier",
    "EntityModelBuilder",
    # Pipeline
    "EntityProcessor",
    "EntityResult",
    "ProcessingReport",
    "load_declaration_file",
    "parse_declarations",
]
