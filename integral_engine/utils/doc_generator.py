"""Generate human-readable documentation from the engine configuration."""

from __future__ import annotations

from pathlib import Path

from integral_engine.utils.config_loader import EngineSettings


def generate_config_docs(settings: EngineSettings, output_path: str) -> str:
    lines = [
        "# Integral engine configuration",
        "",
        "Version: {}".format(settings.version),
        "",
        "## Integration",
        "",
        "- default_steps: {}".format(settings.integration.default_steps),
        "- min_steps: {}".format(settings.integration.min_steps),
        "- max_steps: {}".format(settings.integration.max_steps),
        "- plot_points: {}".format(settings.integration.plot_points),
        "",
        "## Adaptive",
        "",
        "- tolerance: {}".format(settings.adaptive.tolerance),
        "- max_depth: {}".format(settings.adaptive.max_depth),
        "",
        "## Cache",
        "",
        "- max_entries: {}".format(settings.cache.max_entries),
        "- ttl_seconds: {}".format(settings.cache.ttl_seconds if settings.cache.ttl_seconds is not None else "none"),
        "",
        "## Validation",
        "",
        "- max_length: {}".format(settings.validation.max_length),
        "- blocked_patterns: {}".format(
            ", ".join(settings.validation.blocked_patterns) if settings.validation.blocked_patterns else "defaults"
        ),
        "",
        "## Presets",
        "",
    ]

    for name, preset in sorted(settings.presets.items()):
        lines.append("### {}".format(name))
        lines.append("")
        lines.append("- expression: `{}`".format(preset.expression))
        lines.append("- unit: {}".format(preset.unit or "-"))
        lines.append("- y_label: {}".format(preset.y_label))
        if preset.secondary_unit:
            lines.append("- secondary: {} (value / {})".format(preset.secondary_unit, preset.secondary_divisor))
        lines.append("")

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text("\n".join(lines), encoding="utf-8")
    return str(output)
