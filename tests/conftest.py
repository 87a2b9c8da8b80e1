"""
tests/conftest.py
Shared fixtures for the stormgen test suite.

Registries and builders are real objects; no mocking library is used.
Declaration files are written into pytest's tmp_path.
"""

from __future__ import annotations

import copy
import pathlib
from typing import Any, Callable, Dict, List

import pytest
import yaml

from stormgen.builder import EntityModelBuilder
from stormgen.converters import TypeConverterRegistry
from stormgen.databases import DatabaseRegistry
from stormgen.diagnostics import DiagnosticsCollector
from stormgen.models import DatabaseModel, EntityDeclaration, FieldDeclaration


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
DECLARATION_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "entities_example.yaml"


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def converters() -> TypeConverterRegistry:
    return TypeConverterRegistry.with_defaults()


@pytest.fixture(scope="session")
def main_db() -> DatabaseModel:
    return DatabaseModel(name="main", version=2, is_default=True)


@pytest.fixture(scope="session")
def audit_db() -> DatabaseModel:
    return DatabaseModel(name="audit")


@pytest.fixture(scope="session")
def databases(main_db: DatabaseModel, audit_db: DatabaseModel) -> DatabaseRegistry:
    """Two databases, ``main`` being the default."""
    return DatabaseRegistry([main_db, audit_db])


@pytest.fixture(scope="session")
def databases_no_default(audit_db: DatabaseModel) -> DatabaseRegistry:
    return DatabaseRegistry([audit_db])


@pytest.fixture()
def builder(
    converters: TypeConverterRegistry, databases: DatabaseRegistry
) -> EntityModelBuilder:
    return EntityModelBuilder(converters, databases)


@pytest.fixture()
def diagnostics() -> DiagnosticsCollector:
    return DiagnosticsCollector()


# ---------------------------------------------------------------------------
# Declaration factories
# ---------------------------------------------------------------------------


def make_field(name: str, type_name: str = "long", kind: str = "primitive", **kwargs: Any) -> FieldDeclaration:
    return FieldDeclaration(name=name, type_name=type_name, kind=kind, **kwargs)


def make_entity(
    fields: List[FieldDeclaration],
    name: str = "Person",
    package: str = "com.example.model",
    **kwargs: Any,
) -> EntityDeclaration:
    return EntityDeclaration(name=name, package=package, fields=fields, **kwargs)


@pytest.fixture()
def field_factory() -> Callable[..., FieldDeclaration]:
    return make_field


@pytest.fixture()
def entity_factory() -> Callable[..., EntityDeclaration]:
    return make_entity


@pytest.fixture()
def person_declaration() -> EntityDeclaration:
    """A valid entity: implicit ``id``, a string, an enum and a transient field."""
    return make_entity(
        [
            make_field("id"),
            make_field("name", "java.lang.String", "declared"),
            make_field("status", "com.example.model.Status", "enum"),
            make_field("cache", "java.lang.String", "declared", modifiers=["transient"]),
        ]
    )


# ---------------------------------------------------------------------------
# Raw declaration data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_declarations() -> Dict[str, Any]:
    """Load entities_example.yaml once per session."""
    assert DECLARATION_EXAMPLE_PATH.exists(), (
        f"Reference declarations not found at {DECLARATION_EXAMPLE_PATH}."
    )
    with open(DECLARATION_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def declarations_dict(raw_declarations: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy so each test can mutate freely."""
    return copy.deepcopy(raw_declarations)


@pytest.fixture()
def declarations_yaml_path(
    declarations_dict: Dict[str, Any], tmp_path: pathlib.Path
) -> pathlib.Path:
    path = tmp_path / "entities.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(declarations_dict, fh, default_flow_style=False, allow_unicode=True)
    return path
