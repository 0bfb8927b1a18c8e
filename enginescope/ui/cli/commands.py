"""CLI command implementations.

This module provides the command handlers for all CLI commands.
"""

import argparse
import logging
import time
from pathlib import Path

from enginescope.classification.capabilities import CapabilityProber
from enginescope.classification.display import DisplayAnalyzer
from enginescope.classification.engine import EngineDetector
from enginescope.classification.profiles import ProfileRegistry, create_default_registry
from enginescope.classification.report import assemble_report
from enginescope.core.config import Config
from enginescope.core.context import RenderingContext, load_context_descriptor
from enginescope.core.exceptions import EngineScopeError
from enginescope.core.logging_config import log_detection
from enginescope.core.snapshot import load_snapshot

from .formatters import OutputFormatter, get_formatter

logger = logging.getLogger("enginescope.ui.cli")

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_ENGINE = 2


def _get_formatter(args: argparse.Namespace, config: Config) -> OutputFormatter:
    """Get the appropriate formatter based on args and config."""
    output_format = "json" if getattr(args, "json", False) else config.output.default_format
    return get_formatter(
        output_format,
        use_colors=config.output.use_colors,
        verbose=getattr(args, "verbose", 0) > 0,
    )


def _write_output(text: str, output: Path | None) -> None:
    """Print output or write it to a file."""
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        print(f"Results written to {output}")
    else:
        print(text)


def parse_context_specs(specs: list[str] | None) -> dict[str, RenderingContext]:
    """Parse ``CANVAS=DESCRIPTOR.json`` context arguments.

    CANVAS is a canvas id or the canvas index in document order.

    Args:
        specs: Raw argument values.

    Returns:
        Contexts keyed by canvas id or index.

    Raises:
        ValueError: If a spec is malformed or a descriptor invalid.
        FileNotFoundError: If a descriptor file doesn't exist.
    """
    contexts: dict[str, RenderingContext] = {}
    for spec in specs or []:
        key, sep, path = spec.partition("=")
        if not sep or not key or not path:
            raise ValueError(f"Invalid context spec '{spec}', expected CANVAS=DESCRIPTOR.json")
        contexts[key] = load_context_descriptor(Path(path))
    return contexts


def _build_registry(args: argparse.Namespace, config: Config) -> ProfileRegistry:
    """Build the profile registry from args and config."""
    profiles_path = getattr(args, "profiles", None) or config.profiles_path
    if not profiles_path:
        return create_default_registry()

    logger.debug(f"Loading extra profiles from {profiles_path}")
    return create_default_registry(Path(profiles_path))


def run_detect_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the detect command."""
    try:
        contexts = parse_context_specs(args.context)
        snapshot = load_snapshot(args.html_file, contexts)
        registry = _build_registry(args, config)
    except (OSError, ValueError, EngineScopeError) as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    detector = EngineDetector(
        registry=registry,
        min_confidence=config.detection.min_confidence,
        include_capabilities=config.detection.include_capabilities,
    )

    start = time.perf_counter()
    result = detector.detect(snapshot)
    duration_ms = (time.perf_counter() - start) * 1000

    log_detection(
        str(args.html_file),
        result.name if result else None,
        float(result.confidence) if result else 0.0,
        duration_ms,
    )

    report = assemble_report(result, source=str(args.html_file))
    _write_output(_get_formatter(args, config).format_report(report), args.output)

    return EXIT_OK if result else EXIT_NO_ENGINE


def run_profiles_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the profiles command."""
    try:
        registry = _build_registry(args, config)
        scores = None
        if args.scores:
            snapshot = load_snapshot(args.scores, parse_context_specs(args.context))
            scores = EngineDetector(registry=registry).score_all(snapshot)
    except (OSError, ValueError, EngineScopeError) as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    print(_get_formatter(args, config).format_profile_list(registry.names, scores))
    return EXIT_OK


def run_probe_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the probe command."""
    try:
        context = load_context_descriptor(args.descriptor)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    prober = CapabilityProber()
    try:
        record = prober.probe(context)
    except EngineScopeError as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    display = None
    if args.width and args.height:
        display = DisplayAnalyzer(prober).analyze(
            context,
            args.width,
            args.height,
            device_pixel_ratio=args.dpr or config.display.device_pixel_ratio,
        )

    print(_get_formatter(args, config).format_capabilities(record, display))
    return EXIT_OK
