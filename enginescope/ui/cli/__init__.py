"""CLI module for EngineScope."""

from .commands import (
    parse_context_specs,
    run_detect_command,
    run_probe_command,
    run_profiles_command,
)
from .formatters import (
    JsonFormatter,
    OutputFormatter,
    TextFormatter,
    get_formatter,
)

__all__ = [
    # Formatters
    "OutputFormatter",
    "TextFormatter",
    "JsonFormatter",
    "get_formatter",
    # Commands
    "parse_context_specs",
    "run_detect_command",
    "run_profiles_command",
    "run_probe_command",
]
