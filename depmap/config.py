"""Analysis configuration: defaults, ``depmap.yaml`` and environment overrides."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_FILE = "depmap.yaml"


class ConfigError(Exception):
    """The configuration file could not be read or is malformed."""


@dataclass
class AnalysisConfig:
    manifest_path: str | None = None
    metadata_file: str | None = None  # saved `cargo metadata` output, skips cargo
    cargo: str = ""
    tool_timeout: float = 0.0
    largest_limit: int = 10
    deep_threshold: int = 3
    enrich: bool = False

    def __post_init__(self):
        if not self.cargo:
            self.cargo = os.getenv("DEPMAP_CARGO", "cargo")
        if not self.tool_timeout:
            self.tool_timeout = _env_float("DEPMAP_TOOL_TIMEOUT", 120.0)
        if self.largest_limit < 0:
            raise ConfigError(f"largest_limit must be non-negative, got {self.largest_limit}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisConfig:
        """Create config from a mapping, ignoring unknown keys."""
        valid_fields = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in valid_fields})

    @classmethod
    def load(cls, path: Path | str | None = None) -> AnalysisConfig:
        """Load config from a YAML file; a missing default file yields defaults."""
        explicit = path is not None
        filepath = Path(path) if explicit else Path(DEFAULT_CONFIG_FILE)
        if not filepath.exists():
            if explicit:
                raise ConfigError(f"Config file not found: {filepath}")
            return cls()

        try:
            data = yaml.safe_load(filepath.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config {filepath}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Config {filepath} must be a mapping")
        return cls.from_dict(data)

    def merged(self, **overrides: Any) -> AnalysisConfig:
        """Return a copy with every non-None override applied."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_dict(data)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
