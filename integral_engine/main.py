"""CLI entrypoint for the integral engine."""

from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List, Optional

from integral_engine.engine import IntegrationEngine, IntegrationError
from integral_engine.tools import plot_integration, reference_integral
from integral_engine.utils import ConfigError, EngineSettings, generate_config_docs, load_engine_config
from integral_engine.utils.logger import configure_logging

EXIT_OK = 0
EXIT_INTEGRATION_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Builds CLI argument parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(description="Definite integrals of f(t) over [t1, t2]")
    parser.add_argument("--expression", type=str, default="", help="Expression of t, e.g. 100 + 20*t")
    parser.add_argument("--preset", type=str, default=None, help="Use the expression of a configured preset")
    parser.add_argument("--t1", type=float, default=0.0, help="Start of the interval")
    parser.add_argument("--t2", type=float, default=10.0, help="End of the interval")
    parser.add_argument("--steps", type=int, default=None, help="Subintervals (max subintervals when adaptive)")
    parser.add_argument("--adaptive", action="store_true", help="Use adaptive Simpson/trapezoid refinement")
    parser.add_argument("--points", action="store_true", help="Include plot points in the JSON output")
    parser.add_argument("--plot", type=str, default=None, help="Write a PNG plot of f(t) to this path")
    parser.add_argument("--reference", action="store_true", help="Also compute the closed-form integral")
    parser.add_argument("--config", type=str, default=None, help="Path of the YAML engine configuration")
    parser.add_argument("--log-level", type=str, default="WARNING")
    parser.add_argument("--generate-docs", action="store_true", help="Generate markdown docs from the configuration")
    parser.add_argument("--docs-output", type=str, default="docs/CONFIGURATION.md")
    return parser


def _load_settings(path: Optional[str]) -> EngineSettings:
    if path is None:
        return EngineSettings()
    return load_engine_config(path)


def run_cli(args: argparse.Namespace, settings: EngineSettings, engine: Optional[IntegrationEngine] = None) -> int:
    """Executes one integration request using CLI parameters.

    Args:
        args: Parsed CLI arguments.
        settings: Engine settings.
        engine: Optional pre-built engine, mainly for tests.

    Returns:
        Process exit code.

    Raises:
        ValueError: If neither an expression nor a known preset is given.
    """
    preset = None
    expression = args.expression
    if args.preset:
        preset = settings.presets.get(args.preset)
        if preset is None:
            raise ValueError("Unknown preset '{}'. Available: {}".format(args.preset, ", ".join(sorted(settings.presets))))
        expression = expression or preset.expression
    if not expression:
        raise ValueError("--expression or --preset is required")

    engine = engine or IntegrationEngine(settings)
    try:
        result = engine.integrate(expression, args.t1, args.t2, steps=args.steps, use_adaptive=args.adaptive)
    except IntegrationError as exc:
        print(json.dumps({"ok": False, "error": str(exc), "error_type": type(exc).__name__}, ensure_ascii=True))
        return EXIT_INTEGRATION_ERROR

    payload: Dict[str, Any] = {"ok": True, "expression": expression, "t1": args.t1, "t2": args.t2}
    payload.update(result.to_dict())
    if not args.points:
        payload.pop("points")
    if preset is not None:
        payload["preset"] = preset.name
        payload["summary"] = preset.describe(result.value)
    if args.reference:
        payload["reference"] = reference_integral(expression, args.t1, args.t2)
    if args.plot:
        y_label = preset.y_label if preset is not None else "f(t)"
        payload["plot"] = plot_integration(result, expression, args.plot, y_label=y_label)

    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Application entrypoint.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = _load_settings(args.config)
    except ConfigError as exc:
        parser.error(str(exc))

    if args.generate_docs:
        output = generate_config_docs(settings, args.docs_output)
        print("Configuration docs generated at {}".format(output))
        return EXIT_OK

    try:
        return run_cli(args, settings)
    except ValueError as exc:
        parser.error(str(exc))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
