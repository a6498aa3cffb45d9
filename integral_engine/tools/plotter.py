"""Rendering of integration results to image files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from integral_engine.engine.quadrature import IntegrationResult  # noqa: E402


def plot_integration(
    result: IntegrationResult,
    expression: str,
    output_path: str,
    y_label: str = "f(t)",
) -> Dict[str, Any]:
    """Draws f(t) from the result's sample points and shades the integrated area."""
    try:
        if not result.points:
            raise ValueError("Result has no points to plot.")
        ts = [t for t, _ in result.points]
        ys = [y for _, y in result.points]

        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)

        fig, ax = plt.subplots(figsize=(8, 4.5))
        try:
            ax.plot(ts, ys, linewidth=2.0)
            ax.fill_between(ts, ys, alpha=0.2)
            ax.set_title("f(t) = {}  |  integral = {:.6g}".format(expression, result.value))
            ax.set_xlabel("t")
            ax.set_ylabel(y_label)
            ax.grid(True, alpha=0.3)
            fig.tight_layout()
            fig.savefig(output, dpi=150)
        finally:
            plt.close(fig)

        return {"ok": True, "result": str(output), "method": "matplotlib", "metadata": {"points": len(result.points)}}
    except (OSError, ValueError) as exc:
        return {"ok": False, "error": str(exc), "method": "plot_integration", "metadata": {}}
