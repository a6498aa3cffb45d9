"""Utility helpers for the integral engine."""

from .config_loader import ConfigError, EngineSettings, Preset, load_engine_config
from .doc_generator import generate_config_docs
from .logger import configure_logging, get_logger, log_event

__all__ = [
    "ConfigError",
    "EngineSettings",
    "Preset",
    "load_engine_config",
    "generate_config_docs",
    "get_logger",
    "configure_logging",
    "log_event",
]
