"""CLI package exports."""

from .app import app, main
from .config import FileConfig, LoggingSettings, ResolvedConfig, load_planner_config
from .logging import configure_logging

__all__ = [
    "app",
    "main",
    "FileConfig",
    "LoggingSettings",
    "ResolvedConfig",
    "configure_logging",
    "load_planner_config",
]
