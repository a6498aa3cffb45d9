"""Auxiliary tools built on top of the integration engine."""

from .plotter import plot_integration
from .reference import UnsupportedSymbolicError, reference_integral, to_sympy

__all__ = [
    "plot_integration",
    "reference_integral",
    "to_sympy",
    "UnsupportedSymbolicError",
]
