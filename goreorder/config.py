"""Configuration management for goreorder.

Settings come from, in increasing precedence: defaults, a ``.goreorder``
YAML file in the working directory, ``GOREORDER_*`` environment variables,
and command line flags.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .core.models import BUILTIN_FORMATTER
from .core.order import DEFAULT_ORDER, validate_order

CONFIG_FILE_NAME = ".goreorder"
ENV_PREFIX = "GOREORDER_"

# formatters the command line accepts
FORMAT_TOOLS = (BUILTIN_FORMATTER, "gofmt", "goimports")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    """goreorder settings."""

    format: str = BUILTIN_FORMATTER
    write: bool = False
    verbose: bool = False
    reorder_types: bool = False
    diff: bool = False
    order: List[str] = field(default_factory=lambda: list(DEFAULT_ORDER))

    def to_dict(self) -> Dict[str, Any]:
        """Mapping using the YAML file keys."""
        return {_yaml_key(f.name): getattr(self, f.name) for f in fields(self)}


def _yaml_key(attr: str) -> str:
    return attr.replace("_", "-")


def _attr_name(key: str) -> str:
    return key.strip().lower().replace("-", "_")


_FIELDS = {f.name for f in fields(Settings)}
_BOOL_FIELDS = {"write", "verbose", "reorder_types", "diff"}


# =============================================================================
# Sources
# =============================================================================


def load_file(path: Path) -> Dict[str, Any]:
    """Read settings from a YAML file; a missing file yields no settings.

    Raises:
        ValueError: The file is not a YAML mapping.
    """
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid configuration file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"invalid configuration file {path}: expected a mapping")
    return {_attr_name(str(k)): v for k, v in data.items() if _attr_name(str(k)) in _FIELDS}


def load_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Settings from ``GOREORDER_<NAME>`` variables."""
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    for name in _FIELDS:
        key = ENV_PREFIX + name.upper()
        if key in env:
            out[name] = env[key]
    return out


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    cwd: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge every settings source into a validated Settings.

    Args:
        overrides: Explicit values (CLI flags); ``None`` entries are ignored
        cwd: Directory searched for the configuration file (default: current)
        environ: Environment mapping (default: ``os.environ``)

    Raises:
        ValueError: A value has the wrong type or an order name is unknown.
    """
    base = Path.cwd() if cwd is None else cwd
    merged: Dict[str, Any] = {}
    merged.update(load_file(base / CONFIG_FILE_NAME))
    merged.update(load_env(environ))
    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None and k in _FIELDS})

    settings = Settings()
    for name, value in merged.items():
        setattr(settings, name, _coerce(name, value))
    return settings


def _coerce(name: str, value: Any) -> Any:
    if name in _BOOL_FIELDS:
        return _to_bool(name, value)
    if name == "order":
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"order must be a list of names, got {value!r}")
        return list(validate_order(value))
    if name == "format":
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"format must be a tool name, got {value!r}")
        return value.strip()
    return value


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{_yaml_key(name)} must be a boolean, got {value!r}")


def dump_settings(settings: Settings) -> str:
    """Settings as YAML, in the configuration file format."""
    return yaml.safe_dump(settings.to_dict(), default_flow_style=False, sort_keys=False, indent=2)
