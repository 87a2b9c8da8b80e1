# File: stormgen/classifier.py
"""
stormgen - Field Classifier
============================
Decides, for one field declaration, whether it is persisted and how:

1. Transient fields are skipped.  An ``@Id`` on a transient field is an
   error, reported once.
2. Enum-typed fields use the shared enum converter.  An ``@Id`` on an
   enum is an error and the field is skipped.
3. Every other field needs a registered converter.  Unsupported types
   are reported and the field is dropped; the entity carries on.

The classifier never raises for validation problems; it reports to the
sink and returns ``None`` (skip) or a ``FieldClassification``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from stormgen.converters import (
    TypeConverterRegistry,
    UnsupportedTypeError,
    canonical_type_name,
)
from stormgen.diagnostics import DiagnosticsSink, ErrorKind, SourceLocation
from stormgen.models import FieldDeclaration, FieldModel, TypeKind

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.classifier")


@dataclass(frozen=True, slots=True)
class FieldClassification:
    """A persisted field plus whether it carried the primary-key marker."""

    field: FieldModel
    is_id_candidate: bool = False


class FieldClassifier:
    """Classifies field declarations against a converter registry."""

    __slots__ = ("_converters",)

    def __init__(self, converters: TypeConverterRegistry) -> None:
        self._converters: TypeConverterRegistry = converters

    def classify(
        self,
        declaration: FieldDeclaration,
        location: SourceLocation,
        diagnostics: DiagnosticsSink,
    ) -> Optional[FieldClassification]:
        """
        Classify one field.

        Args:
            declaration: The field as supplied by the front-end.
            location: Where errors for this field are reported.
            diagnostics: Sink receiving any errors.

        Returns:
            The classification, or ``None`` when the field is not persisted.
        """
        if declaration.is_transient:
            if declaration.is_id:
                diagnostics.report(
                    ErrorKind.ID_ON_TRANSIENT_FIELD,
                    "@Id fields cannot be transient",
                    location,
                )
            logger.debug("Skipping transient field %s", location)
            return None

        if declaration.kind == TypeKind.ENUM:
            return self._classify_enum(declaration, location, diagnostics)

        storage_type: str = canonical_type_name(declaration.type_name)
        if declaration.kind == TypeKind.UNSUPPORTED:
            return self._drop_unsupported(UnsupportedTypeError(storage_type), location, diagnostics)
        try:
            converter = self._converters.lookup(storage_type)
        except UnsupportedTypeError as exc:
            return self._drop_unsupported(exc, location, diagnostics)

        field_model = FieldModel(
            field_name=declaration.name,
            storage_type=storage_type,
            is_enum=False,
            converter=converter,
        )
        logger.debug("Classified %s as %s", location, storage_type)
        return FieldClassification(field=field_model, is_id_candidate=declaration.is_id)

    def _classify_enum(
        self,
        declaration: FieldDeclaration,
        location: SourceLocation,
        diagnostics: DiagnosticsSink,
    ) -> Optional[FieldClassification]:
        if declaration.is_id:
            diagnostics.report(ErrorKind.ID_ON_ENUM, "@Id invalid on enums", location)
            return None

        try:
            converter = self._converters.enum_converter()
        except UnsupportedTypeError as exc:
            diagnostics.report(ErrorKind.UNSUPPORTED_TYPE, str(exc), location)
            return None

        field_model = FieldModel(
            field_name=declaration.name,
            storage_type=declaration.type_name.strip(),
            is_enum=True,
            converter=converter,
        )
        logger.debug("Classified %s as enum %s", location, field_model.storage_type)
        return FieldClassification(field=field_model)

    @staticmethod
    def _drop_unsupported(
        error: UnsupportedTypeError,
        location: SourceLocation,
        diagnostics: DiagnosticsSink,
    ) -> None:
        logger.warning("Dropping field %s: %s", location, error)
        diagnostics.report(ErrorKind.UNSUPPORTED_TYPE, str(error), location)


__all__: List[str] = ["FieldClassification", "FieldClassifier"]
