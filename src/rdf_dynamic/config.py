"""
Configuration for graph dictionaries.

Provides:
- Base IRIs for subject and predicate keys
- Namespace prefixes bound on the graph
- JSON / YAML persistence
- Configuration validation
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rdflib import Graph

from rdf_dynamic.errors import ConfigValidationError, InvalidNameError
from rdf_dynamic.names import is_absolute_iri

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


@dataclass
class DynamicConfig:
    """Settings a DynamicGraph is built from."""
    subject_base: Optional[str] = None
    predicate_base: Optional[str] = None
    collapse_singular: bool = False
    prefixes: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_base": self.subject_base,
            "predicate_base": self.predicate_base,
            "collapse_singular": self.collapse_singular,
            "prefixes": dict(self.prefixes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DynamicConfig":
        return cls(
            subject_base=data.get("subject_base"),
            predicate_base=data.get("predicate_base"),
            collapse_singular=bool(data.get("collapse_singular", False)),
            prefixes=dict(data.get("prefixes") or {}),
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns list of error messages (empty if valid).
        """
        errors = []

        for name in ("subject_base", "predicate_base"):
            value = getattr(self, name)
            if value is not None and not _is_absolute(value):
                errors.append(f"{name} must be an absolute IRI: {value!r}")

        for prefix, namespace in self.prefixes.items():
            if not isinstance(prefix, str) or (prefix and not prefix.isidentifier()):
                errors.append(f"Invalid prefix: {prefix!r}")
            if not isinstance(namespace, str) or not _is_absolute(namespace):
                errors.append(f"Namespace for prefix {prefix!r} must be an absolute IRI: {namespace!r}")

        return errors

    def validate_or_raise(self) -> None:
        """Validate configuration, raising on errors."""
        errors = self.validate()
        if errors:
            logger.warning(f"Invalid configuration: {len(errors)} problems")
            raise ConfigValidationError("; ".join(errors))

    def apply_prefixes(self, graph: Graph) -> None:
        """Bind the configured prefixes on a graph, replacing existing bindings."""
        for prefix, namespace in self.prefixes.items():
            graph.bind(prefix, namespace, override=True, replace=True)
        if self.prefixes:
            logger.debug(f"Bound {len(self.prefixes)} prefixes")

    # =========================================================================
    # Persistence
    # =========================================================================

    def save(self, path: Path) -> None:
        """Save configuration to a .json, .yaml or .yml file."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "DynamicConfig":
        """
        Load configuration from file.

        A missing file gives the default configuration.

        Raises:
            ConfigValidationError: If the file content is not a mapping
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"No config at {path}, using defaults")
            return cls()

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)


def _is_absolute(iri: str) -> bool:
    try:
        return is_absolute_iri(iri)
    except InvalidNameError:
        return False
