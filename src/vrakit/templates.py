"""
Helpers for filling request and action templates.

Fields are addressed by dotted path (``data.cpu``,
``data.vSphere_Machine_1.data.memory``). Values given on the command line are
parsed as YAML scalars so ``4`` becomes an int and ``true`` a bool.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, MutableMapping

import yaml

from vrakit.core.errors import SerializationError

_MISSING = object()


def _split(path: str) -> list[str]:
    parts = path.split(".")
    if not path or any(not part for part in parts):
        raise SerializationError("Invalid template field path", details={"path": path})
    return parts


def get_field(document: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read the value at ``path``, returning ``default`` when any hop is missing."""
    current: Any = document
    for part in _split(path):
        if not isinstance(current, Mapping):
            return default
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return default
    return current


def set_field(document: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate objects as needed."""
    *parents, leaf = _split(path)
    current: Any = document
    for part in parents:
        child = current.get(part)
        if child is None:
            child = {}
            current[part] = child
        elif not isinstance(child, MutableMapping):
            raise SerializationError(
                "Template field is not an object",
                details={"path": path, "segment": part},
            )
        current = child
    current[leaf] = value


def parse_assignment(assignment: str) -> tuple[str, Any]:
    """Parse ``path=value`` into a (path, typed value) pair."""
    path, sep, raw = assignment.partition("=")
    path = path.strip()
    if not sep or not path:
        raise SerializationError(
            "Field assignments must look like PATH=VALUE",
            details={"assignment": assignment},
        )
    try:
        value = yaml.safe_load(raw) if raw.strip() else ""
    except yaml.YAMLError as exc:
        raise SerializationError(
            "Could not parse field value",
            details={"assignment": assignment},
        ) from exc
    return path, value


def parse_assignments(assignments: Iterable[str] | None) -> dict[str, Any]:
    return dict(parse_assignment(item) for item in assignments or ())


def load_template_file(path: str | Path) -> dict[str, Any]:
    """Load a template document from a YAML or JSON file."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SerializationError(
            "Could not read template file",
            details={"path": str(file_path), "error": str(exc)},
        ) from exc

    try:
        if file_path.suffix == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SerializationError(
            "Could not parse template file",
            details={"path": str(file_path)},
        ) from exc

    if not isinstance(document, dict):
        raise SerializationError(
            "Template file must contain an object",
            details={"path": str(file_path)},
        )
    return document
