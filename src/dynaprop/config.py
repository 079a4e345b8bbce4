"""Load registry configurations from YAML, TOML, or JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .exc import ConfigurationError
from .registry import FunctionRegistry


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a configuration dict from a file, dispatched by extension.

    Supported extensions: ``.json``, ``.toml``, ``.yaml`` / ``.yml``.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == '.json':
        with open(path) as f:
            data = json.load(f)
    elif suffix == '.toml':
        data = _load_toml(path)
    elif suffix in ('.yaml', '.yml'):
        data = _load_yaml(path)
    else:
        raise ValueError(
            f"Unsupported config file extension {suffix!r}. "
            "Use .json, .toml, .yaml, or .yml."
        )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def registry_from_config(path: str | Path) -> FunctionRegistry:
    """Load a :class:`FunctionRegistry` from a config file."""
    data = load_config(path)
    return FunctionRegistry.from_config(data)


# ── Internal loaders ─────────────────────────────────────────────

def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML using ``tomllib`` (3.11+) or ``tomli``."""
    try:
        import tomllib  # type: ignore[import-not-found]
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore[no-redef]
        except ModuleNotFoundError:
            raise ImportError(
                "TOML support requires Python 3.11+ (built-in tomllib) "
                "or the 'tomli' package. Install with: pip install dynaprop[toml]"
            )
    with open(path, 'rb') as f:
        return tomllib.load(f)


def _load_yaml(path: Path) -> Any:
    """Load YAML using ``pyyaml``."""
    try:
        import yaml
    except ModuleNotFoundError:
        raise ImportError(
            "YAML support requires the 'pyyaml' package. "
            "Install with: pip install dynaprop[yaml]"
        )
    with open(path) as f:
        return yaml.safe_load(f)
