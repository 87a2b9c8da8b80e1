# File: stormgen/processor.py
"""
stormgen - Entity Processing Pipeline (Orchestrator)
=====================================================

Connects the pieces for a whole declaration file:

    Declaration file → ProjectDeclaration → registries → EntityModel per entity

Workflow::

    1. Load the declaration file (JSON or YAML).
    2. Parse into ``ProjectDeclaration`` (models.py).
    3. Build the converter and database registries once.
    4. Build every entity, each with its own ``DiagnosticsCollector``.
    5. Return a ``ProcessingReport``.

Error handling strategy:
    - Unreadable or malformed files raise ``FileNotFoundError`` / ``ValueError``.
    - Inconsistent database configuration raises ``ConfigurationError``.
    - Entity problems are diagnostics; one bad entity never affects another.
    - Entities with diagnostics are listed as skipped for generation.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from pydantic import ValidationError

from stormgen.builder import EntityModelBuilder
from stormgen.converters import TypeConverterRegistry
from stormgen.databases import DatabaseRegistry
from stormgen.diagnostics import Diagnostic, DiagnosticsCollector
from stormgen.models import EntityDeclaration, EntityModel, ProjectDeclaration
from stormgen.utils import Timer

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.processor")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EntityResult:
    """The model built for one entity and the diagnostics reported for it."""

    model: EntityModel
    diagnostics: DiagnosticsCollector

    @property
    def is_valid(self) -> bool:
        return self.diagnostics.is_valid

    @property
    def errors(self) -> List[Diagnostic]:
        return self.diagnostics.items


@dataclass(frozen=False, slots=True)
class ProcessingReport:
    """
    Report produced by ``EntityProcessor.process_all()``.

    ``results`` is in the same order as the input declarations.
    """

    results: List[EntityResult] = field(default_factory=list)
    source: str = ""
    total_elapsed_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return all(r.is_valid for r in self.results)

    @property
    def models(self) -> List[EntityModel]:
        return [r.model for r in self.results]

    @property
    def valid_models(self) -> List[EntityModel]:
        return [r.model for r in self.results if r.is_valid]

    @property
    def skipped_entities(self) -> List[str]:
        return [r.model.qualified_name for r in self.results if not r.is_valid]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for r in self.results for d in r.diagnostics]

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  stormgen Entity Validation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:             {status}")
        if self.source:
            lines.append(f"  Source:             {self.source}")
        lines.append(f"  Entities processed: {len(self.results)}")
        lines.append(f"  Valid entities:     {len(self.valid_models)}")
        lines.append(f"  Total time:         {self.total_elapsed_seconds:.3f}s")

        if self.results:
            lines.append(f"{'─'*60}")
            lines.append("  Entities:")
            for result in self.results:
                icon: str = "✓" if result.is_valid else "✗"
                m: EntityModel = result.model
                db: str = m.database.name if m.database else "-"
                lines.append(
                    f"    {icon} {m.qualified_name:<32s} "
                    f"table={m.table_name} db={db} fields={len(m.fields)}"
                )

        errors: List[Diagnostic] = self.errors
        if errors:
            lines.append(f"{'─'*60}")
            lines.append(f"  Errors ({len(errors)}):")
            for err in errors:
                lines.append(f"    ✗ {err}")

        skipped: List[str] = self.skipped_entities
        if skipped:
            lines.append(f"{'─'*60}")
            lines.append(f"  Skipped for generation ({len(skipped)}):")
            for name in skipped:
                lines.append(f"    ⊘ {name}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Declaration loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_declaration_file(path: Path) -> Dict[str, Any]:
    """
    Load a declaration file (JSON or YAML), dispatching on extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Declaration file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Declaration path is not a file: {path}")

    suffix: str = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    elif suffix == ".json":
        return _load_json_file(path)
    else:
        logger.info("Unknown extension '%s', trying JSON then YAML.", suffix)
        try:
            return _load_json_file(path)
        except ValueError:
            return _load_yaml_file(path)


def parse_declarations(raw: Dict[str, Any]) -> ProjectDeclaration:
    """
    Parse a raw dictionary (from JSON/YAML) into a ``ProjectDeclaration``.

    Raises:
        ValueError: If the structure doesn't match the declaration models.
    """
    if "entities" not in raw:
        raise ValueError(
            "Cannot find entity declarations in input. Expected top-level key: 'entities'."
        )
    try:
        return ProjectDeclaration.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Declaration parsing failed: {exc}") from exc


# ---------------------------------------------------------------------------
# EntityProcessor
# ---------------------------------------------------------------------------


class EntityProcessor:
    """
    Builds entity models for many declarations against shared registries.

    Usage::

        processor = EntityProcessor.from_file(Path("entities.yaml"))
        report = processor.process_all(processor.declarations)
        print(report.summary())
    """

    def __init__(
        self,
        converters: TypeConverterRegistry,
        databases: DatabaseRegistry,
        declarations: Optional[Sequence[EntityDeclaration]] = None,
        source: str = "",
    ) -> None:
        self.converters: TypeConverterRegistry = converters
        self.databases: DatabaseRegistry = databases
        self.declarations: List[EntityDeclaration] = list(declarations or [])
        self.source: str = source
        self._builder: EntityModelBuilder = EntityModelBuilder(converters, databases)

    @classmethod
    def from_project(
        cls, project: ProjectDeclaration, source: str = ""
    ) -> "EntityProcessor":
        converters = TypeConverterRegistry.with_defaults(project.converters)
        databases = DatabaseRegistry(project.databases)
        return cls(converters, databases, project.entities, source=source)

    @classmethod
    def from_file(cls, path: Path) -> "EntityProcessor":
        project: ProjectDeclaration = parse_declarations(load_declaration_file(path))
        logger.info(
            "Loaded %d entity declaration(s) from %s", project.entity_count, path
        )
        return cls.from_project(project, source=str(path))

    def process(self, declaration: EntityDeclaration) -> EntityResult:
        """Build one entity with a fresh diagnostics collector."""
        diagnostics = DiagnosticsCollector()
        model: EntityModel = self._builder.build(declaration, diagnostics)
        if diagnostics.has_errors:
            logger.info(
                "Entity %s: %d error(s).", declaration.qualified_name, len(diagnostics)
            )
        return EntityResult(model=model, diagnostics=diagnostics)

    def process_all(
        self,
        declarations: Optional[Sequence[EntityDeclaration]] = None,
        max_workers: int = 1,
    ) -> ProcessingReport:
        """
        Build every declaration.  With ``max_workers > 1`` entities are built
        on a thread pool; result order always matches input order.
        """
        todo: List[EntityDeclaration] = list(
            declarations if declarations is not None else self.declarations
        )
        report = ProcessingReport(source=self.source)

        with Timer("process entities") as t:
            if max_workers > 1 and len(todo) > 1:
                with ThreadPoolExecutor(max_workers=max_workers) as pool:
                    report.results = list(pool.map(self.process, todo))
            else:
                report.results = [self.process(d) for d in todo]

        report.total_elapsed_seconds = t.elapsed
        logger.info(
            "Processed %d entities: %d valid, %d with errors.",
            len(report.results),
            len(report.valid_models),
            len(report.skipped_entities),
        )
        return report


__all__: List[str] = [
    "EntityResult",
    "ProcessingReport",
    "load_declaration_file",
    "parse_declarations",
    "EntityProcessor",
]
