"""
HealthNote settings.

Settings are layered, later layers winning:

    1. ``HealthNoteConfig`` field defaults
    2. a YAML or JSON config file (``--config``, ``$HEALTHNOTE_CONFIG`` or
       ``~/.healthnote/config.yaml``)
    3. ``HEALTHNOTE_SECTION__KEY`` environment variables

The merged mapping is validated once, when it is loaded.  Callers only ever
see a typed ``HealthNoteConfig``.

Usage:
    settings = load_settings()
    settings.sync.timeout            # 10.0
    settings.supabase.enabled        # False until URL and anon key are set

    load_settings(overrides={"paths": {"data_dir": "/tmp/hn"}})
"""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .config_schema import HealthNoteConfig
from .exceptions import ConfigurationError

ENV_PREFIX = "HEALTHNOTE_"
CONFIG_ENV_VAR = "HEALTHNOTE_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".healthnote" / "config.yaml"


def resolve_config_path(config_file: str | None = None, environ: Mapping[str, str] | None = None) -> Path:
    """Explicit path first, then ``$HEALTHNOTE_CONFIG``, then the home default."""
    environ = os.environ if environ is None else environ
    return Path(config_file or environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH).expanduser()


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML or JSON settings file. A missing file is an empty layer."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    try:
        with open(path, encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file type '{suffix}': {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must hold a mapping of sections, got {type(data).__name__}")
    return data


def env_overrides(environ: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Collect ``PREFIX_SECTION__KEY=value`` pairs into nested sections.

    Only names with a ``__`` separator count, so ``HEALTHNOTE_CONFIG`` itself
    is not mistaken for a setting.
    """
    environ = os.environ if environ is None else environ
    layer: dict[str, Any] = {}
    for name, value in environ.items():
        if not name.startswith(prefix) or "__" not in name:
            continue
        *sections, key = name[len(prefix) :].lower().split("__")
        current = layer
        for section in sections:
            current = current.setdefault(section, {})
        current[key] = value
    return layer


def merge_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge mappings left to right; nested sections merge, scalars replace."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
                merged[key] = merge_layers(merged[key], value)
            elif isinstance(value, Mapping):
                merged[key] = merge_layers(value)
            else:
                merged[key] = value
    return merged


def load_settings(
    config_file: str | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    env_prefix: str = ENV_PREFIX,
) -> HealthNoteConfig:
    """Read, merge and validate every settings layer.

    ``overrides`` sits between the file and the environment; tests and
    embedding callers use it instead of writing a file.

    Raises:
        ConfigurationError: The file is unreadable or a value fails validation.
    """
    path = resolve_config_path(config_file, environ)
    raw = merge_layers(read_config_file(path), overrides or {}, env_overrides(environ, env_prefix))
    try:
        return HealthNoteConfig.model_validate(raw)
    except PydanticValidationError as e:
        problems = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise ConfigurationError(f"Invalid settings in {path}: {problems}") from e
