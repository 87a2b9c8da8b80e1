# File: stormgen/databases.py
"""
stormgen - Database Registry
=============================
Named database targets, plus the optional default that entities without
an explicit database bind to.  Configured once before any entity is
processed; read-only afterwards.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from stormgen.models import DatabaseModel

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.databases")


class ConfigurationError(ValueError):
    """Raised when the database (or converter) configuration is inconsistent."""


class DatabaseRegistry:
    """
    Immutable lookup of ``DatabaseModel`` by name.

    Raises ``ConfigurationError`` at construction time when two databases
    share a name or more than one is flagged as default.
    """

    __slots__ = ("_databases", "_default")

    def __init__(self, databases: Iterable[DatabaseModel] = ()) -> None:
        table: Dict[str, DatabaseModel] = {}
        default: Optional[DatabaseModel] = None

        for db in databases:
            if db.name in table:
                raise ConfigurationError(
                    f"Database '{db.name}' is defined more than once."
                )
            table[db.name] = db
            if db.is_default:
                if default is not None:
                    raise ConfigurationError(
                        f"Databases '{default.name}' and '{db.name}' are both "
                        f"marked as default; only one default is allowed."
                    )
                default = db

        self._databases: Mapping[str, DatabaseModel] = MappingProxyType(table)
        self._default: Optional[DatabaseModel] = default
        logger.debug(
            "Database registry ready: %d database(s), default=%s",
            len(table),
            default.name if default else None,
        )

    def get_default_database(self) -> Optional[DatabaseModel]:
        return self._default

    def get_database_by_name(self, name: str) -> Optional[DatabaseModel]:
        return self._databases.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._databases)

    def __iter__(self) -> Iterator[DatabaseModel]:
        return iter(self._databases.values())

    def __len__(self) -> int:
        return len(self._databases)

    def __repr__(self) -> str:
        return f"<DatabaseRegistry {self.names} default={self._default!r}>"


__all__: List[str] = ["ConfigurationError", "DatabaseRegistry"]
