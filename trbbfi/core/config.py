"""
Interpreter settings.

Precedence, lowest first: dataclass defaults, an optional YAML file, then
TRBBFI_* environment variables (a .env file in the working directory is
loaded into the environment first).
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from .tape import DEFAULT_CELLS, MAX_CELLS

ENV_PREFIX = "TRBBFI_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Raised for unreadable or out-of-range settings."""


@dataclass
class InterpreterConfig:
    """Settings shared by the CLI, the shell and the runner."""
    initial_cells: int = DEFAULT_CELLS
    max_cells: int = MAX_CELLS
    debug: bool = False
    max_file_size: int = 1000000  # bytes
    max_code_length: int = 10000  # characters accepted by the shell's `code` command
    dump_count: int = 16
    prompt: str = "trbbfi> "

    def __post_init__(self):
        if self.initial_cells <= 0:
            raise ConfigError("initial_cells must be positive")
        if self.max_cells < self.initial_cells:
            raise ConfigError("max_cells must be at least initial_cells")
        if self.max_file_size <= 0:
            raise ConfigError("max_file_size must be positive")
        if self.max_code_length <= 0:
            raise ConfigError("max_code_length must be positive")
        if self.dump_count <= 0:
            raise ConfigError("dump_count must be positive")


def _coerce(name: str, value: Any, kind: type) -> Any:
    if kind is bool:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigError(f"{name}: expected a boolean, got {value!r}")
    if kind is int:
        if isinstance(value, bool):
            raise ConfigError(f"{name}: expected an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{name}: expected an integer, got {value!r}") from None
    return str(value)


def _field_types() -> Dict[str, type]:
    return {f.name: type(f.default) for f in fields(InterpreterConfig)}


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML mapping of setting name -> value."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping of settings")

    types = _field_types()
    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in types:
            raise ConfigError(f"{path}: unknown setting '{key}'")
        values[key] = _coerce(key, value, types[key])
    return values


def load_env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name, kind in _field_types().items():
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = _coerce(key, environ[key], kind)
    return values


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
    **overrides: Any,
) -> InterpreterConfig:
    """Build the effective configuration.

    Keyword overrides (e.g. debug=True from a command line flag) win over
    everything else.
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    if environ is None:
        environ = os.environ

    config = InterpreterConfig()
    if path:
        config = replace(config, **load_config_file(path))
    config = replace(config, **load_env_overrides(environ))
    if overrides:
        config = replace(config, **overrides)
    return config
