# File: stormgen/builder.py
"""
stormgen - Entity Model Builder
================================
Turns one ``EntityDeclaration`` into an ``EntityModel``.

Steps, in order::

    1. Table naming      explicit name, else the class simple name
    2. Database binding  explicit name → lookup; else the default database
    3. Field pass        classify every field, pick the @Id candidate
    4. Id fallback       a field literally named ``id``
    5. Verification      the id must exist and be a ``long``

The id policy is two-tier on purpose: a marked field is type-checked the
moment it is seen, while the by-name fallback is only checked in step 5.

Errors never stop the pass.  The builder always returns a model; whether
it is usable is decided by the diagnostics that were reported.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from stormgen.classifier import FieldClassification, FieldClassifier
from stormgen.converters import TypeConverterRegistry
from stormgen.databases import DatabaseRegistry
from stormgen.diagnostics import DiagnosticsSink, ErrorKind, SourceLocation
from stormgen.models import (
    ID_STORAGE_TYPE,
    IMPLICIT_ID_FIELD,
    DatabaseModel,
    EntityDeclaration,
    EntityModel,
    FieldModel,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.builder")


class EntityModelBuilder:
    """
    Builds entity models against fixed converter and database registries.

    The builder holds no per-entity state, so one instance may serve
    several threads at once.
    """

    __slots__ = ("_classifier", "_databases")

    def __init__(
        self,
        converters: TypeConverterRegistry,
        databases: DatabaseRegistry,
    ) -> None:
        self._classifier: FieldClassifier = FieldClassifier(converters)
        self._databases: DatabaseRegistry = databases

    def build(
        self,
        declaration: EntityDeclaration,
        diagnostics: DiagnosticsSink,
    ) -> EntityModel:
        entity_location = SourceLocation(declaration.qualified_name)
        logger.debug("Building entity %s", declaration.qualified_name)

        table_name: str = self._resolve_table_name(declaration)
        database: Optional[DatabaseModel] = self._bind_database(
            declaration, entity_location, diagnostics
        )

        # -- Field pass -----------------------------------------------------
        fields: List[FieldModel] = []
        seen_names: Set[str] = set()
        id_field: Optional[FieldModel] = None

        for field_decl in declaration.fields:
            field_location = entity_location.for_field(field_decl.name)

            classification: Optional[FieldClassification] = self._classifier.classify(
                field_decl, field_location, diagnostics
            )
            if classification is None:
                continue

            # Only persisted fields need unique names
            if classification.field.field_name in seen_names:
                diagnostics.report(
                    ErrorKind.DUPLICATE_FIELD,
                    f"Field '{field_decl.name}' is declared more than once",
                    field_location,
                )
                continue
            seen_names.add(classification.field.field_name)
            fields.append(classification.field)

            if classification.is_id_candidate:
                if id_field is None:
                    if classification.field.storage_type == ID_STORAGE_TYPE:
                        id_field = classification.field
                    else:
                        diagnostics.report(
                            ErrorKind.INVALID_ID_TYPE,
                            f"@Id field must be of type {ID_STORAGE_TYPE}",
                            field_location,
                        )
                else:
                    diagnostics.report(
                        ErrorKind.DUPLICATE_ID,
                        "Duplicate @Id",
                        field_location,
                    )

        # -- Id fallback: a field named "id" ------------------------------------
        if id_field is None:
            for candidate in fields:
                if candidate.field_name == IMPLICIT_ID_FIELD:
                    id_field = candidate
                    break

        # -- Final verification -----------------------------------------------
        if id_field is None or id_field.storage_type != ID_STORAGE_TYPE:
            diagnostics.report(
                ErrorKind.MISSING_OR_INVALID_ID,
                f"Entity must contain a field named {IMPLICIT_ID_FIELD} "
                f"or annotated with @Id of type {ID_STORAGE_TYPE}",
                entity_location,
            )

        imports: Set[str] = {declaration.qualified_name}
        imports.update(f.converter.converter_class for f in fields)

        model = EntityModel(
            entity_name=declaration.name,
            package=declaration.package,
            table_name=table_name,
            database=database,
            fields=tuple(fields),
            id_field=id_field,
            imports=frozenset(imports),
        )
        logger.debug("Built %r", model)
        return model

    # -- Steps --------------------------------------------------------------

    @staticmethod
    def _resolve_table_name(declaration: EntityDeclaration) -> str:
        if declaration.table_name:
            return declaration.table_name
        return declaration.name

    def _bind_database(
        self,
        declaration: EntityDeclaration,
        location: SourceLocation,
        diagnostics: DiagnosticsSink,
    ) -> Optional[DatabaseModel]:
        if declaration.database_name:
            db = self._databases.get_database_by_name(declaration.database_name)
            if db is None:
                diagnostics.report(
                    ErrorKind.UNKNOWN_DATABASE,
                    f"There is no @Database named {declaration.database_name}",
                    location,
                )
            return db

        default_db = self._databases.get_default_database()
        if default_db is None:
            diagnostics.report(
                ErrorKind.NO_DATABASE_CONFIGURED,
                "You must define at least one @Database",
                location,
            )
        return default_db


__all__: List[str] = ["EntityModelBuilder"]
