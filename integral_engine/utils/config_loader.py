"""Configuration loader for YAML-based engine settings and presets."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


@dataclass
class IntegrationSettings:
    default_steps: int = 1000
    min_steps: int = 100
    max_steps: int = 10000
    plot_points: int = 200


@dataclass
class AdaptiveSettings:
    tolerance: float = 1e-6
    max_depth: int = 20


@dataclass
class CacheSettings:
    max_entries: int = 256
    ttl_seconds: Optional[float] = 3600.0


@dataclass
class ValidationSettings:
    max_length: int = 400
    # None keeps the validator defaults.
    blocked_patterns: Optional[Tuple[str, ...]] = None


@dataclass
class Preset:
    """Named usage scenario with a default expression and display units."""

    name: str
    expression: str
    unit: str = ""
    y_label: str = "f(t)"
    secondary_unit: Optional[str] = None
    secondary_divisor: Optional[float] = None

    def describe(self, value: float) -> str:
        text = "{:.2f} {}".format(value, self.unit).strip()
        if self.secondary_unit and self.secondary_divisor:
            text += " ({:.4f} {})".format(value / self.secondary_divisor, self.secondary_unit)
        return text


def _default_presets() -> Dict[str, Preset]:
    return {
        "energy": Preset(
            name="energy",
            expression="100 + 20*t",
            unit="Wh",
            y_label="P(t) [Watts]",
            secondary_unit="kWh",
            secondary_divisor=1000.0,
        ),
        "network": Preset(
            name="network",
            expression="50 + 10*sin(t)",
            unit="Mb",
            y_label="R(t) [Mb/s]",
            secondary_unit="MB",
            secondary_divisor=8.0,
        ),
        "cpu": Preset(
            name="cpu",
            expression="30 + 40*t/(t+10)",
            unit="load units",
            y_label="CPU(t) [%]",
        ),
    }


@dataclass
class EngineSettings:
    version: str = "1.0.0"
    integration: IntegrationSettings = field(default_factory=IntegrationSettings)
    adaptive: AdaptiveSettings = field(default_factory=AdaptiveSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    validation: ValidationSettings = field(default_factory=ValidationSettings)
    presets: Dict[str, Preset] = field(default_factory=_default_presets)


class ConfigError(RuntimeError):
    """Raised when configuration files cannot be loaded or validated."""


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError("Configuration file not found: {}".format(path))
    with path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ConfigError("Configuration root must be a mapping in {}".format(path))
    return loaded


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name, {}) or {}
    if not isinstance(value, dict):
        raise ConfigError("'{}' must be a mapping in engine configuration".format(name))
    return value


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_patterns(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise ConfigError("'validation.blocked_patterns' must be a list")
    return tuple(str(item) for item in value)


def _load_presets(raw: Dict[str, Any]) -> Dict[str, Preset]:
    presets: Dict[str, Preset] = {}
    for name, node in raw.items():
        if not isinstance(node, dict) or not node.get("expression"):
            raise ConfigError("Preset '{}' must define an expression".format(name))
        presets[str(name)] = Preset(
            name=str(name),
            expression=str(node["expression"]),
            unit=str(node.get("unit", "")),
            y_label=str(node.get("y_label", "f(t)")),
            secondary_unit=node.get("secondary_unit"),
            secondary_divisor=_optional_float(node.get("secondary_divisor")),
        )
    return presets


def load_engine_config(path: str = "configs/engine_config.yml") -> EngineSettings:
    data = _load_yaml(Path(path))
    integration_data = _section(data, "integration")
    adaptive_data = _section(data, "adaptive")
    cache_data = _section(data, "cache")
    validation_data = _section(data, "validation")
    presets_data = _section(data, "presets")

    try:
        integration = IntegrationSettings(
            default_steps=int(integration_data.get("default_steps", 1000)),
            min_steps=int(integration_data.get("min_steps", 100)),
            max_steps=int(integration_data.get("max_steps", 10000)),
            plot_points=int(integration_data.get("plot_points", 200)),
        )
        adaptive = AdaptiveSettings(
            tolerance=float(adaptive_data.get("tolerance", 1e-6)),
            max_depth=int(adaptive_data.get("max_depth", 20)),
        )
        cache = CacheSettings(
            max_entries=int(cache_data.get("max_entries", 256)),
            ttl_seconds=_optional_float(cache_data.get("ttl_seconds", 3600.0)),
        )
        validation = ValidationSettings(
            max_length=int(validation_data.get("max_length", 400)),
            blocked_patterns=_optional_patterns(validation_data.get("blocked_patterns")),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError("Invalid value in {}: {}".format(path, exc)) from exc

    if integration.min_steps < 1 or integration.max_steps < integration.min_steps:
        raise ConfigError("integration.min_steps/max_steps must satisfy 1 <= min_steps <= max_steps")

    return EngineSettings(
        version=str(data.get("version", "1.0.0")),
        integration=integration,
        adaptive=adaptive,
        cache=cache,
        validation=validation,
        presets=_load_presets(presets_data) if presets_data else _default_presets(),
    )
