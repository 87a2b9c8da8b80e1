# File: stormgen/models.py
"""
stormgen - Core Data Models
============================
Pydantic V2 models for both sides of the entity pipeline:

    Entity declaration (input) → Classification → EntityModel (output)

The *declaration* models describe what the front-end hands us: a class
marked as a persistent entity and its ordered field declarations.  The
*output* models (``FieldModel``, ``EntityModel``) are what the DAO code
generator consumes.  Output models are frozen; a new declaration always
produces a new model.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from sqlalchemy import (
    BigInteger,
    Column,
    Float,
    LargeBinary,
    MetaData,
    Table,
    Text,
)
from sqlalchemy.types import TypeEngine

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.models")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: The only storage type an id field may have (64-bit signed integer).
ID_STORAGE_TYPE: str = "long"

#: Name adopted as id when no field carries the primary-key marker.
IMPLICIT_ID_FIELD: str = "id"

#: Base class every generated DAO extends.
DEFAULT_BASE_DAO_CLASS: str = "com.turbomanage.storm.SQLiteDao"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TypeKind(str, Enum):
    """Pre-resolved shape of a field's declared type."""

    PRIMITIVE = "primitive"
    DECLARED = "declared"
    ENUM = "enum"
    UNSUPPORTED = "unsupported"


class Modifier(str, Enum):
    """Field modifiers the front-end may report."""

    TRANSIENT = "transient"
    STATIC = "static"
    FINAL = "final"
    PRIVATE = "private"
    PROTECTED = "protected"
    PUBLIC = "public"
    VOLATILE = "volatile"


class BindType(str, Enum):
    """How a value is bound into a prepared statement."""

    BLOB = "BLOB"
    DOUBLE = "DOUBLE"
    LONG = "LONG"
    STRING = "STRING"


class SqlType(str, Enum):
    """SQLite column affinity used for the generated table."""

    INTEGER = "INTEGER"
    REAL = "REAL"
    TEXT = "TEXT"
    BLOB = "BLOB"


_SQLALCHEMY_TYPES: Dict[SqlType, type] = {
    SqlType.INTEGER: BigInteger,
    SqlType.REAL: Float,
    SqlType.TEXT: Text,
    SqlType.BLOB: LargeBinary,
}


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Converter & database descriptors
# ---------------------------------------------------------------------------


class ConverterDescriptor(BaseModel):
    """Describes how values of one canonical type are persisted."""

    model_config = _SHARED_CONFIG

    type_name: str = Field(..., min_length=1, description="Canonical type served.")
    converter_class: str = Field(
        ..., min_length=1, description="Qualified class name of the runtime converter."
    )
    bind_type: BindType = Field(..., description="Statement binding type.")
    sql_type: SqlType = Field(..., description="Column affinity.")
    is_primitive: bool = Field(
        default=False, description="True for unboxed primitives (never NULL)."
    )

    @property
    def sqlalchemy_type(self) -> TypeEngine:
        return _SQLALCHEMY_TYPES[self.sql_type]()

    def __repr__(self) -> str:
        return f"<Converter {self.type_name} → {self.sql_type.value}>"


class DatabaseModel(BaseModel):
    """A named database target that entities bind to."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Database file / logical name.")
    version: int = Field(default=1, ge=1, description="Schema version.")
    helper_class: Optional[str] = Field(
        default=None, description="Qualified name of the generated open-helper."
    )
    is_default: bool = Field(
        default=False,
        alias="default",
        description="Bind entities without an explicit database here.",
    )

    def __repr__(self) -> str:
        flag: str = " (default)" if self.is_default else ""
        return f"<Database {self.name} v{self.version}{flag}>"


# ---------------------------------------------------------------------------
# Input side: declarations supplied by the front-end
# ---------------------------------------------------------------------------


class FieldDeclaration(BaseModel):
    """One declared field of an entity class, already resolved by the front-end."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Simple field name.")
    type_name: str = Field(
        ..., min_length=1, alias="type", description="Declared type, as written."
    )
    kind: TypeKind = Field(default=TypeKind.DECLARED, description="Type shape.")
    modifiers: FrozenSet[Modifier] = Field(
        default_factory=frozenset, description="Modifier flags."
    )
    is_id: bool = Field(
        default=False, alias="id", description="Carries the primary-key marker."
    )

    @field_validator("modifiers", mode="before")
    @classmethod
    def _lowercase_modifiers(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(m.lower() if isinstance(m, str) else m for m in v)
        return v

    @property
    def is_transient(self) -> bool:
        return Modifier.TRANSIENT in self.modifiers

    def __repr__(self) -> str:
        id_flag: str = " @Id" if self.is_id else ""
        return f"<FieldDeclaration {self.name}: {self.type_name} ({self.kind.value}){id_flag}>"


class EntityDeclaration(BaseModel):
    """A class marked as a persistent entity."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Simple class name.")
    package: Optional[str] = Field(default=None, description="Declaring package.")
    table_name: Optional[str] = Field(
        default=None, description="Explicit table name (empty = class name)."
    )
    database_name: Optional[str] = Field(
        default=None,
        alias="database",
        description="Explicit database name (empty = default database).",
    )
    fields: List[FieldDeclaration] = Field(
        default_factory=list, description="Fields in declaration order."
    )

    @property
    def qualified_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.name}"
        return self.name

    def __repr__(self) -> str:
        return f"<EntityDeclaration {self.qualified_name} ({len(self.fields)} fields)>"


# ---------------------------------------------------------------------------
# Output side: the validated model
# ---------------------------------------------------------------------------


class FieldModel(BaseModel):
    """One persisted field of an entity."""

    model_config = _SHARED_CONFIG

    field_name: str = Field(..., min_length=1)
    storage_type: str = Field(..., min_length=1, description="Canonical type name.")
    is_enum: bool = Field(default=False)
    converter: ConverterDescriptor

    @property
    def column_name(self) -> str:
        return self.field_name

    @property
    def bind_type(self) -> BindType:
        return self.converter.bind_type

    @property
    def sql_type(self) -> SqlType:
        return self.converter.sql_type

    @property
    def nullable(self) -> bool:
        return not self.converter.is_primitive

    def __repr__(self) -> str:
        enum_flag: str = " enum" if self.is_enum else ""
        return f"<Field {self.field_name} {self.storage_type}{enum_flag}>"


class EntityModel(BaseModel):
    """
    The canonical, validated description of one entity.

    ``id_field`` is the very same ``FieldModel`` instance held in
    ``fields``; it is never a copy.
    """

    model_config = _SHARED_CONFIG

    entity_name: str = Field(..., min_length=1, description="Simple class name.")
    package: Optional[str] = Field(default=None)
    table_name: str = Field(..., min_length=1)
    database: Optional[DatabaseModel] = Field(default=None)
    fields: Tuple[FieldModel, ...] = Field(default=())
    id_field: Optional[FieldModel] = Field(default=None)
    imports: FrozenSet[str] = Field(default_factory=frozenset)
    base_dao_class: str = Field(default=DEFAULT_BASE_DAO_CLASS)

    @property
    def qualified_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.entity_name}"
        return self.entity_name

    @property
    def field_names(self) -> List[str]:
        return [f.field_name for f in self.fields]

    @property
    def is_bound(self) -> bool:
        return self.database is not None

    def get_field(self, name: str) -> Optional[FieldModel]:
        for f in self.fields:
            if f.field_name == name:
                return f
        return None

    def to_table(self, metadata: Optional[MetaData] = None) -> Table:
        """
        Describe the entity's storage layout as a SQLAlchemy ``Table``.

        The id field becomes the primary key; primitive-typed columns
        are NOT NULL.  No DDL is emitted.  Calling it again with the same
        ``metadata`` replaces the previously defined table.
        """
        metadata = metadata if metadata is not None else MetaData()
        columns: List[Column] = []
        for f in self.fields:
            is_pk: bool = f is self.id_field
            columns.append(
                Column(
                    f.column_name,
                    f.converter.sqlalchemy_type,
                    primary_key=is_pk,
                    nullable=f.nullable and not is_pk,
                )
            )
        return Table(self.table_name, metadata, *columns, extend_existing=True)

    def __repr__(self) -> str:
        db: str = self.database.name if self.database else "unbound"
        id_name: str = self.id_field.field_name if self.id_field else "none"
        return (
            f"<Entity {self.qualified_name} table={self.table_name} "
            f"db={db} id={id_name} ({len(self.fields)} fields)>"
        )


# ---------------------------------------------------------------------------
# Declaration file root
# ---------------------------------------------------------------------------


class ProjectDeclaration(BaseModel):
    """Everything one declaration file describes."""

    model_config = _SHARED_CONFIG

    databases: List[DatabaseModel] = Field(default_factory=list)
    converters: List[ConverterDescriptor] = Field(
        default_factory=list, description="Custom converters added to the built-ins."
    )
    entities: List[EntityDeclaration] = Field(default_factory=list)

    @property
    def entity_count(self) -> int:
        return len(self.entities)


__all__: List[str] = [
    "ID_STORAGE_TYPE",
    "IMPLICIT_ID_FIELD",
    "DEFAULT_BASE_DAO_CLASS",
    "TypeKind",
    "Modifier",
    "BindType",
    "SqlType",
    "ConverterDescriptor",
    "DatabaseModel",
    "FieldDeclaration",
    "EntityDeclaration",
    "FieldModel",
    "EntityModel",
    "ProjectDeclaration",
]
