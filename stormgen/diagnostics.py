# File: stormgen/diagnostics.py
"""
stormgen - Diagnostics
=======================
Every problem found while building an entity model is a *diagnostic*
attached to a source location (an entity, or a field of an entity).
Nothing here raises: the builder and classifier report and carry on, and
the caller decides what to do with the collected diagnostics.

``DiagnosticsSink`` is the reporting contract; ``DiagnosticsCollector``
is the in-memory implementation used by the processor and the tests.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.diagnostics")


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------


class ErrorKind(str, Enum):
    """Kinds of validation error an entity declaration can carry."""

    UNSUPPORTED_TYPE = "UnsupportedTypeError"
    ID_ON_TRANSIENT_FIELD = "IdOnTransientFieldError"
    ID_ON_ENUM = "IdOnEnumError"
    INVALID_ID_TYPE = "InvalidIdTypeError"
    DUPLICATE_ID = "DuplicateIdError"
    MISSING_OR_INVALID_ID = "MissingOrInvalidIdError"
    UNKNOWN_DATABASE = "UnknownDatabaseError"
    NO_DATABASE_CONFIGURED = "NoDatabaseConfiguredError"
    DUPLICATE_FIELD = "DuplicateFieldError"


# ---------------------------------------------------------------------------
# Locations & diagnostics
# ---------------------------------------------------------------------------


class SourceLocation:
    """An entity, optionally narrowed to one of its fields."""

    __slots__ = ("entity", "field")

    def __init__(self, entity: str, field: Optional[str] = None) -> None:
        self.entity: str = entity
        self.field: Optional[str] = field

    def for_field(self, field: str) -> "SourceLocation":
        return SourceLocation(self.entity, field)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceLocation):
            return NotImplemented
        return (self.entity, self.field) == (other.entity, other.field)

    def __hash__(self) -> int:
        return hash((self.entity, self.field))

    def __str__(self) -> str:
        if self.field:
            return f"{self.entity}.{self.field}"
        return self.entity

    def __repr__(self) -> str:
        return f"<SourceLocation {self}>"


class Diagnostic:
    """Lightweight error descriptor (no Pydantic overhead)."""

    __slots__ = ("kind", "message", "location")

    def __init__(self, kind: ErrorKind, message: str, location: SourceLocation) -> None:
        self.kind: ErrorKind = kind
        self.message: str = message
        self.location: SourceLocation = location

    @property
    def code(self) -> str:
        return self.kind.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Diagnostic):
            return NotImplemented
        return (self.kind, self.message, self.location) == (
            other.kind,
            other.message,
            other.location,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.message, self.location))

    def __repr__(self) -> str:
        return f"[{self.kind.value}] {self.location}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "entity": self.location.entity,
            "field": self.location.field,
        }


# ---------------------------------------------------------------------------
# Sink contract
# ---------------------------------------------------------------------------


@runtime_checkable
class DiagnosticsSink(Protocol):
    """Anything that accepts error reports against a source location."""

    def report(self, kind: ErrorKind, message: str, location: SourceLocation) -> None:
        ...


class DiagnosticsCollector:
    """
    Accumulates ``Diagnostic`` instances in report order.

    One collector per entity build; collectors are not shared between
    threads.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[Diagnostic] = []

    # -- Mutation -----------------------------------------------------------

    def report(self, kind: ErrorKind, message: str, location: SourceLocation) -> None:
        diagnostic: Diagnostic = Diagnostic(kind, message, location)
        logger.debug("Reported %r", diagnostic)
        self._items.append(diagnostic)

    def merge(self, other: "DiagnosticsCollector") -> None:
        """Merge another collector into this one. O(k) where k = len(other)."""
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def items(self) -> List[Diagnostic]:
        return list(self._items)

    @property
    def kinds(self) -> List[ErrorKind]:
        return [d.kind for d in self._items]

    def of_kind(self, kind: ErrorKind) -> List[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    def count(self, kind: ErrorKind) -> int:
        return sum(1 for d in self._items if d.kind == kind)

    @property
    def has_errors(self) -> bool:
        return bool(self._items)

    @property
    def error_count(self) -> int:
        return len(self._items)

    @property
    def is_valid(self) -> bool:
        return not self._items

    def summary(self) -> str:
        return f"Diagnostics: {self.error_count} error(s)."

    def __repr__(self) -> str:
        return f"<DiagnosticsCollector {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def format_report(self) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary()]
        for item in self._items:
            lines.append(f"  ✗ [{item.code}] {item.location}: {item.message}")
        return "\n".join(lines)


__all__: List[str] = [
    "ErrorKind",
    "SourceLocation",
    "Diagnostic",
    "DiagnosticsSink",
    "DiagnosticsCollector",
]
