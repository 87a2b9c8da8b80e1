"""
tests/test_converters.py
Unit tests for stormgen.converters and stormgen.databases.
"""

from __future__ import annotations

import pytest

from stormgen.converters import (
    ENUM_TYPE_KEY,
    TypeConverterRegistry,
    UnsupportedTypeError,
    canonical_type_name,
)
from stormgen.databases import ConfigurationError, DatabaseRegistry
from stormgen.models import BindType, ConverterDescriptor, DatabaseModel, SqlType


# ===========================================================================
# canonical_type_name
# ===========================================================================


class TestCanonicalTypeName:

    def test_primitive_unchanged(self) -> None:
        assert canonical_type_name("long") == "long"

    def test_unqualified_alias_is_qualified(self) -> None:
        assert canonical_type_name("String") == "java.lang.String"
        assert canonical_type_name("Date") == "java.util.Date"

    def test_whitespace_removed(self) -> None:
        assert canonical_type_name(" byte [] ") == "byte[]"

    def test_unknown_name_passes_through(self) -> None:
        assert canonical_type_name("com.example.Thing") == "com.example.Thing"


# ===========================================================================
# TypeConverterRegistry
# ===========================================================================


class TestTypeConverterRegistry:

    def test_lookup_long(self, converters: TypeConverterRegistry) -> None:
        descriptor = converters.lookup("long")
        assert descriptor.converter_class.endswith("LongConverter")
        assert descriptor.bind_type == BindType.LONG
        assert descriptor.sql_type == SqlType.INTEGER
        assert descriptor.is_primitive

    def test_boxed_type_shares_converter_class(self, converters: TypeConverterRegistry) -> None:
        assert (
            converters.lookup("java.lang.Long").converter_class
            == converters.lookup("long").converter_class
        )
        assert not converters.lookup("java.lang.Long").is_primitive

    def test_lookup_by_alias(self, converters: TypeConverterRegistry) -> None:
        assert converters.lookup("String").type_name == "java.lang.String"

    def test_unsupported_type_raises(self, converters: TypeConverterRegistry) -> None:
        with pytest.raises(UnsupportedTypeError) as exc_info:
            converters.lookup("java.util.List")
        assert exc_info.value.type_name == "java.util.List"
        assert "java.util.List" in str(exc_info.value)

    def test_enum_fallback_registered(self, converters: TypeConverterRegistry) -> None:
        enum_converter = converters.enum_converter()
        assert enum_converter.type_name == ENUM_TYPE_KEY
        assert enum_converter.converter_class.endswith("EnumConverter")
        assert ENUM_TYPE_KEY in converters

    def test_custom_converter_via_with_defaults(self) -> None:
        uri = ConverterDescriptor(
            type_name="android.net.Uri",
            converter_class="com.example.UriConverter",
            bind_type=BindType.STRING,
            sql_type=SqlType.TEXT,
        )
        registry = TypeConverterRegistry.with_defaults([uri])
        assert registry.lookup("android.net.Uri") == uri
        assert registry.supports("long")

    def test_extend_returns_new_registry(self, converters: TypeConverterRegistry) -> None:
        uri = ConverterDescriptor(
            type_name="android.net.Uri",
            converter_class="com.example.UriConverter",
            bind_type="STRING",
            sql_type="TEXT",
        )
        extended = converters.extend([uri])
        assert "android.net.Uri" in extended
        assert "android.net.Uri" not in converters
        assert len(extended) == len(converters) + 1

    def test_custom_converter_overrides_builtin(self) -> None:
        custom_date = ConverterDescriptor(
            type_name="java.util.Date",
            converter_class="com.example.IsoDateConverter",
            bind_type=BindType.STRING,
            sql_type=SqlType.TEXT,
        )
        registry = TypeConverterRegistry.with_defaults([custom_date])
        assert registry.lookup("Date").converter_class == "com.example.IsoDateConverter"

    def test_empty_registry_has_no_enum_converter(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            TypeConverterRegistry().enum_converter()


# ===========================================================================
# DatabaseRegistry
# ===========================================================================


class TestDatabaseRegistry:

    def test_default_and_named_lookup(self, databases: DatabaseRegistry) -> None:
        assert databases.get_default_database().name == "main"
        assert databases.get_database_by_name("audit").name == "audit"
        assert databases.get_database_by_name("nope") is None

    def test_no_default(self, databases_no_default: DatabaseRegistry) -> None:
        assert databases_no_default.get_default_database() is None

    def test_duplicate_name_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="more than once"):
            DatabaseRegistry([DatabaseModel(name="a"), DatabaseModel(name="a")])

    def test_two_defaults_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="default"):
            DatabaseRegistry(
                [
                    DatabaseModel(name="a", is_default=True),
                    DatabaseModel(name="b", is_default=True),
                ]
            )

    def test_default_alias_accepted(self) -> None:
        db = DatabaseModel.model_validate({"name": "main", "default": True})
        assert db.is_default
