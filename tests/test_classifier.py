"""
tests/test_classifier.py
Unit tests for stormgen.classifier.FieldClassifier.
"""

from __future__ import annotations

import pytest

from stormgen.classifier import FieldClassifier
from stormgen.converters import TypeConverterRegistry
from stormgen.diagnostics import DiagnosticsCollector, ErrorKind, SourceLocation
from stormgen.models import FieldDeclaration, TypeKind

from tests.conftest import make_field

LOCATION = SourceLocation("com.example.model.Person", "f")


@pytest.fixture()
def classifier(converters: TypeConverterRegistry) -> FieldClassifier:
    return FieldClassifier(converters)


class TestTransientFields:

    def test_transient_is_skipped(self, classifier: FieldClassifier, diagnostics: DiagnosticsCollector) -> None:
        decl = make_field("cache", "java.lang.String", "declared", modifiers=["transient"])
        assert classifier.classify(decl, LOCATION, diagnostics) is None
        assert diagnostics.is_valid

    def test_transient_id_reported_once(self, classifier: FieldClassifier, diagnostics: DiagnosticsCollector) -> None:
        decl = make_field("id", modifiers=["TRANSIENT"], is_id=True)
        assert classifier.classify(decl, LOCATION, diagnostics) is None
        assert diagnostics.kinds == [ErrorKind.ID_ON_TRANSIENT_FIELD]

    def test_transient_unsupported_type_not_reported(
        self, classifier: FieldClassifier, diagnostics: DiagnosticsCollector
    ) -> None:
        decl = make_field("things", "java.util.List", "declared", modifiers=["transient"])
        assert classifier.classify(decl, LOCATION, diagnostics) is None
        assert diagnostics.is_valid


class TestEnumFields:

    def test_enum_uses_fallback_converter(
        self,
        classifier: FieldClassifier,
        converters: TypeConverterRegistry,
        diagnostics: DiagnosticsCollector,
    ) -> None:
        decl = make_field("status", "com.example.Status", "enum")
        result = classifier.classify(decl, LOCATION, diagnostics)
        assert result is not None
        assert result.field.is_enum
        assert result.field.converter == converters.enum_converter()
        assert result.field.storage_type == "com.example.Status"
        assert not result.is_id_candidate
        assert diagnostics.is_valid

    def test_enum_id_is_error(self, classifier: FieldClassifier, diagnostics: DiagnosticsCollector) -> None:
        decl = make_field("status", "com.example.Status", "enum", is_id=True)
        assert classifier.classify(decl, LOCATION, diagnostics) is None
        assert diagnostics.kinds == [ErrorKind.ID_ON_ENUM]


class TestConvertedFields:

    @pytest.mark.parametrize(
        "type_name, kind, expected",
        [
            ("long", TypeKind.PRIMITIVE, "long"),
            ("int", TypeKind.PRIMITIVE, "int"),
            ("String", TypeKind.DECLARED, "java.lang.String"),
            ("java.util.Date", TypeKind.DECLARED, "java.util.Date"),
            ("byte[]", TypeKind.PRIMITIVE, "byte[]"),
        ],
    )
    def test_supported_types(
        self,
        classifier: FieldClassifier,
        diagnostics: DiagnosticsCollector,
        type_name: str,
        kind: TypeKind,
        expected: str,
    ) -> None:
        decl = FieldDeclaration(name="f", type_name=type_name, kind=kind)
        result = classifier.classify(decl, LOCATION, diagnostics)
        assert result is not None
        assert result.field.storage_type == expected
        assert result.field.field_name == "f"
        assert not result.field.is_enum
        assert diagnostics.is_valid

    def test_id_marker_carried(self, classifier: FieldClassifier, diagnostics: DiagnosticsCollector) -> None:
        result = classifier.classify(make_field("key", is_id=True), LOCATION, diagnostics)
        assert result is not None
        assert result.is_id_candidate

    def test_unsupported_type_reported_and_dropped(
        self, classifier: FieldClassifier, diagnostics: DiagnosticsCollector
    ) -> None:
        decl = make_field("things", "java.util.List", "declared")
        assert classifier.classify(decl, LOCATION, diagnostics) is None
        assert diagnostics.kinds == [ErrorKind.UNSUPPORTED_TYPE]
        assert diagnostics.items[0].location == LOCATION

    def test_unsupported_kind_never_looked_up(
        self, classifier: FieldClassifier, diagnostics: DiagnosticsCollector
    ) -> None:
        # "long" is registered, but the front-end said it could not resolve the type
        decl = make_field("weird", "long", "unsupported")
        assert classifier.classify(decl, LOCATION, diagnostics) is None
        assert diagnostics.kinds == [ErrorKind.UNSUPPORTED_TYPE]
