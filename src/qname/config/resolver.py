"""Merge configuration sources in precedence order."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import QnameConfig

ENV_PREFIX = "QNAME__"


def resolve_with_precedence(
    *,
    defaults: QnameConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> QnameConfig:
    """Layer overrides onto ``defaults``: file, then environment, then CLI.

    Keys may be nested mappings or dotted paths such as ``naming.seed``.

    Raises:
        ConfigError: If an override is malformed or the merged values are invalid.
    """
    merged = defaults.model_dump(mode="python")
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is not None:
            merged = _deep_merge(merged, _expand_dotted(source, source_name=name))

    try:
        return QnameConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def parse_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Extract nested overrides from ``QNAME__`` prefixed variables.

    Values are parsed as YAML scalars so ``QNAME__NAMING__SEED=7`` yields an int.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not path:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        assign_nested(overrides, path, value)
    return overrides


def assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at a nested ``path`` inside ``target``.

    Raises:
        ConfigError: If a non-mapping value sits along the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(f"Cannot assign into '{segment}' because it is not a mapping.")
        node = existing
    node[path[-1]] = value


def _expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _expand_dotted(value, source_name=source_name)
        assign_nested(result, key.split("."), value)
    return result


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, MappingABC) and isinstance(merged.get(key), MappingABC):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = [
    "ENV_PREFIX",
    "resolve_with_precedence",
    "parse_env",
    "assign_nested",
]
