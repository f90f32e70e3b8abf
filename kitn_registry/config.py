"""Registry configuration — where the corpus lives and how imports are spelled.

Every operation receives a ``RegistryConfig`` explicitly. Values come from
the defaults below, optionally overridden by ``kitn-registry.yaml`` at the
registry root.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from kitn_registry.errors import ConfigError

CONFIG_FILE = "kitn-registry.yaml"


@dataclass(frozen=True)
class RegistryConfig:
    """Paths and naming conventions for one registry checkout."""

    root: Path = Path(".")
    components_dir: str = "components"
    output_dir: str = "r"
    staging_dir: str = "_staging"
    alias_scope: str = "@kitn"
    source_extension: str = ".ts"
    runtime_extension: str = ".js"

    @property
    def components_path(self) -> Path:
        return self.root / self.components_dir

    @property
    def output_path(self) -> Path:
        return self.root / self.output_dir

    @property
    def staging_path(self) -> Path:
        return self.root / self.staging_dir


def load_config(root: str | Path = ".") -> RegistryConfig:
    """Build the config for ``root``, applying ``kitn-registry.yaml`` if present."""
    root = Path(root)
    config = RegistryConfig(root=root)

    config_path = root / CONFIG_FILE
    if not config_path.exists():
        return config

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping, got {type(data).__name__}")

    allowed = {f.name for f in fields(RegistryConfig)} - {"root"}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigError(f"{config_path}: unknown keys {unknown}")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ConfigError(f"{config_path}: '{key}' must be a string")

    config = replace(config, **data)
    for key in ("output_dir", "staging_dir"):
        _check_generated_dir(config, key, config_path)
    return config


def _check_generated_dir(config: RegistryConfig, key: str, config_path: Path):
    """Reject a generated directory that overlaps the registry root or the components."""
    target = (config.root / getattr(config, key)).resolve()
    root = config.root.resolve()
    components = config.components_path.resolve()

    if target == root or root.is_relative_to(target):
        raise ConfigError(f"{config_path}: '{key}' must not be the registry root or one of its parents")
    if components.is_relative_to(target) or target.is_relative_to(components):
        raise ConfigError(f"{config_path}: '{key}' must not overlap '{config.components_dir}'")
