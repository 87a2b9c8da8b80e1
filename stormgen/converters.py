# File: stormgen/converters.py
"""
stormgen - Type Converter Registry
===================================
Maps a canonical type name to the ``ConverterDescriptor`` that says how a
value of that type is bound into a statement and stored in a column.

The registry is an immutable configuration object: build it once (the
built-ins, plus any custom converters from the declaration file) and
hand the same instance to every builder.  ``extend()`` returns a *new*
registry, so concurrent readers never see a mutation.

All enumeration types share one fallback converter, registered under the
reserved key ``java.lang.Enum``.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from stormgen.models import BindType, ConverterDescriptor, SqlType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.converters")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ENUM_TYPE_KEY: str = "java.lang.Enum"

_CONVERTER_PACKAGE: str = "com.turbomanage.storm.types"

_WHITESPACE_RE: re.Pattern[str] = re.compile(r"\s+")

# Unqualified names the front-end may hand us, resolved to canonical keys
_TYPE_ALIASES: Dict[str, str] = {
    "Boolean": "java.lang.Boolean",
    "Byte": "java.lang.Byte",
    "Character": "java.lang.Character",
    "Double": "java.lang.Double",
    "Float": "java.lang.Float",
    "Integer": "java.lang.Integer",
    "Long": "java.lang.Long",
    "Short": "java.lang.Short",
    "String": "java.lang.String",
    "Date": "java.util.Date",
    "UUID": "java.util.UUID",
    "BigDecimal": "java.math.BigDecimal",
    "BigInteger": "java.math.BigInteger",
    "Byte[]": "java.lang.Byte[]",
    "Enum": ENUM_TYPE_KEY,
}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class UnsupportedTypeError(LookupError):
    """Raised by ``TypeConverterRegistry.lookup`` for an unregistered type."""

    def __init__(self, type_name: str) -> None:
        self.type_name: str = type_name
        super().__init__(
            f"Type '{type_name}' is not supported; register a converter for it."
        )


# ---------------------------------------------------------------------------
# Canonical type names
# ---------------------------------------------------------------------------


def canonical_type_name(type_name: str) -> str:
    """
    Normalise a declared type name to its registry key.

    Whitespace is removed (``byte []`` → ``byte[]``) and unqualified
    ``java.lang`` / ``java.util`` / ``java.math`` names are qualified.
    Anything else is returned unchanged.

    Examples:
        >>> canonical_type_name(" String ")
        'java.lang.String'
        >>> canonical_type_name("long")
        'long'
    """
    compact: str = _WHITESPACE_RE.sub("", type_name)
    return _TYPE_ALIASES.get(compact, compact)


# ---------------------------------------------------------------------------
# Built-in converters
# ---------------------------------------------------------------------------


def _converter(
    type_name: str,
    simple_class: str,
    bind_type: BindType,
    sql_type: SqlType,
    is_primitive: bool = False,
) -> ConverterDescriptor:
    return ConverterDescriptor(
        type_name=type_name,
        converter_class=f"{_CONVERTER_PACKAGE}.{simple_class}",
        bind_type=bind_type,
        sql_type=sql_type,
        is_primitive=is_primitive,
    )


def _builtin_converters() -> List[ConverterDescriptor]:
    # (primitive, boxed, converter class, bind, sql)
    paired = [
        ("boolean", "java.lang.Boolean", "BooleanConverter", BindType.LONG, SqlType.INTEGER),
        ("byte", "java.lang.Byte", "ByteConverter", BindType.LONG, SqlType.INTEGER),
        ("char", "java.lang.Character", "CharConverter", BindType.LONG, SqlType.INTEGER),
        ("double", "java.lang.Double", "DoubleConverter", BindType.DOUBLE, SqlType.REAL),
        ("float", "java.lang.Float", "FloatConverter", BindType.DOUBLE, SqlType.REAL),
        ("int", "java.lang.Integer", "IntegerConverter", BindType.LONG, SqlType.INTEGER),
        ("long", "java.lang.Long", "LongConverter", BindType.LONG, SqlType.INTEGER),
        ("short", "java.lang.Short", "ShortConverter", BindType.LONG, SqlType.INTEGER),
        ("byte[]", "java.lang.Byte[]", "BlobConverter", BindType.BLOB, SqlType.BLOB),
    ]
    result: List[ConverterDescriptor] = []
    for primitive, boxed, cls_name, bind, sql in paired:
        result.append(_converter(primitive, cls_name, bind, sql, is_primitive=primitive != "byte[]"))
        result.append(_converter(boxed, cls_name, bind, sql))

    result.extend(
        [
            _converter("java.lang.String", "StringConverter", BindType.STRING, SqlType.TEXT),
            _converter("java.util.Date", "DateConverter", BindType.LONG, SqlType.INTEGER),
            _converter("java.util.UUID", "UuidConverter", BindType.STRING, SqlType.TEXT),
            _converter("java.math.BigDecimal", "BigDecimalConverter", BindType.STRING, SqlType.TEXT),
            _converter("java.math.BigInteger", "BigIntegerConverter", BindType.BLOB, SqlType.BLOB),
            _converter(ENUM_TYPE_KEY, "EnumConverter", BindType.STRING, SqlType.TEXT),
        ]
    )
    return result


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TypeConverterRegistry:
    """
    Read-only mapping of canonical type name → ``ConverterDescriptor``.

    Usage::

        registry = TypeConverterRegistry.with_defaults()
        registry.lookup("long").converter_class
        # 'com.turbomanage.storm.types.LongConverter'
    """

    __slots__ = ("_converters",)

    def __init__(self, converters: Iterable[ConverterDescriptor] = ()) -> None:
        table: Dict[str, ConverterDescriptor] = {}
        for descriptor in converters:
            key: str = canonical_type_name(descriptor.type_name)
            if key in table:
                logger.debug(
                    "Converter for '%s' replaced: %s → %s",
                    key,
                    table[key].converter_class,
                    descriptor.converter_class,
                )
            table[key] = descriptor
        self._converters: Mapping[str, ConverterDescriptor] = MappingProxyType(table)

    @classmethod
    def with_defaults(
        cls, extra: Optional[Iterable[ConverterDescriptor]] = None
    ) -> "TypeConverterRegistry":
        """Built-in converters, optionally followed by custom ones (which win)."""
        converters: List[ConverterDescriptor] = _builtin_converters()
        if extra:
            converters.extend(extra)
        registry = cls(converters)
        logger.debug("Converter registry ready with %d type(s).", len(registry))
        return registry

    def extend(self, converters: Iterable[ConverterDescriptor]) -> "TypeConverterRegistry":
        """Return a new registry with ``converters`` added on top of this one."""
        return TypeConverterRegistry([*self._converters.values(), *converters])

    # -- Query --------------------------------------------------------------

    def lookup(self, type_name: str) -> ConverterDescriptor:
        """
        Return the converter for ``type_name``.

        Raises:
            UnsupportedTypeError: If no converter is registered.
        """
        key: str = canonical_type_name(type_name)
        try:
            return self._converters[key]
        except KeyError:
            raise UnsupportedTypeError(key) from None

    def enum_converter(self) -> ConverterDescriptor:
        """The shared converter used for every enumeration-typed field."""
        return self.lookup(ENUM_TYPE_KEY)

    def supports(self, type_name: str) -> bool:
        return canonical_type_name(type_name) in self._converters

    @property
    def type_names(self) -> List[str]:
        return sorted(self._converters)

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and self.supports(type_name)

    def __iter__(self) -> Iterator[ConverterDescriptor]:
        return iter(self._converters.values())

    def __len__(self) -> int:
        return len(self._converters)

    def __repr__(self) -> str:
        return f"<TypeConverterRegistry {len(self)} types>"


__all__: List[str] = [
    "ENUM_TYPE_KEY",
    "UnsupportedTypeError",
    "canonical_type_name",
    "TypeConverterRegistry",
]
