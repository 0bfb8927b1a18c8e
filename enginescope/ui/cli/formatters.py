"""Output formatters for CLI output.

This module provides formatters for displaying detection reports, the
profile registry, capability records, and display analyses as text or JSON.
"""

import json
import sys
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Any

from enginescope.core.models import CapabilityRecord, DisplayAnalysis


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Confidence colors
    CONFIDENCE_HIGH = "\033[92m"  # Green
    CONFIDENCE_MEDIUM = "\033[93m"  # Yellow
    CONFIDENCE_LOW = "\033[91m"  # Red

    # Status colors
    SUCCESS = "\033[92m"  # Green
    FAILURE = "\033[91m"  # Red
    WARNING = "\033[93m"  # Yellow
    INFO = "\033[94m"  # Blue

    @classmethod
    def is_supported(cls) -> bool:
        """Check if terminal supports colors."""
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def colorize(text: str, color: str, force: bool = False) -> str:
    """Apply color to text if supported.

    Args:
        text: Text to colorize
        color: ANSI color code
        force: Force color even if not supported

    Returns:
        Colored text or plain text
    """
    if force or Colors.is_supported():
        return f"{color}{text}{Colors.RESET}"
    return text


def get_confidence_color(confidence: float) -> str:
    """Get color for a confidence score."""
    if confidence >= 0.75:
        return Colors.CONFIDENCE_HIGH
    elif confidence >= 0.5:
        return Colors.CONFIDENCE_MEDIUM
    return Colors.CONFIDENCE_LOW


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format_report(self, report: dict[str, Any]) -> str:
        """Format a detection report."""
        pass

    @abstractmethod
    def format_profile_list(
        self,
        names: list[str],
        scores: list[tuple[str, Fraction]] | None = None,
    ) -> str:
        """Format the registered profiles, optionally with scores."""
        pass

    @abstractmethod
    def format_capabilities(
        self,
        record: CapabilityRecord,
        display: DisplayAnalysis | None = None,
    ) -> str:
        """Format a capability record and optional display analysis."""
        pass


class TextFormatter(OutputFormatter):
    """Plain text formatter with optional colors."""

    def __init__(self, use_colors: bool = True, verbose: bool = False):
        """Initialize the text formatter.

        Args:
            use_colors: Whether to use ANSI colors
            verbose: Whether to show verbose output
        """
        self.use_colors = use_colors and Colors.is_supported()
        self.verbose = verbose

    def _colorize(self, text: str, color: str) -> str:
        """Apply color if enabled."""
        if self.use_colors:
            return colorize(text, color, force=True)
        return text

    def format_report(self, report: dict[str, Any]) -> str:
        """Format a detection report."""
        lines = []

        if report.get("source"):
            lines.append(f"Document: {report['source']}")

        if not report.get("detected"):
            lines.append(self._colorize("No engine detected", Colors.DIM))
            return "\n".join(lines)

        confidence = report["confidence"]
        name = self._colorize(report["name"], Colors.BOLD)
        conf_text = self._colorize(f"{confidence:.0%}", get_confidence_color(confidence))
        lines.append(f"Engine: {name} (confidence {conf_text})")

        if report["features"]:
            lines.append("\n  Features:")
            for feature in report["features"]:
                lines.append(f"    + {feature}")

        if report["warnings"]:
            lines.append("\n  Warnings:")
            for warning in report["warnings"]:
                lines.append(self._colorize(f"    ! {warning}", Colors.WARNING))

        capabilities = report.get("capabilities")
        if capabilities and self.verbose:
            lines.append("\n  WebGL Capabilities:")
            for key, value in capabilities.items():
                lines.append(f"    {key}: {value}")

        if report["recommendations"]:
            lines.append("\n  Recommendations:")
            for i, recommendation in enumerate(report["recommendations"], 1):
                lines.append(f"    {i}. {recommendation}")

        return "\n".join(lines)

    def format_profile_list(
        self,
        names: list[str],
        scores: list[tuple[str, Fraction]] | None = None,
    ) -> str:
        """Format the registered profiles as a table."""
        if not names:
            return "No profiles registered."

        lines = []
        score_map = dict(scores or [])

        header = f"{'#':<4} {'Profile':<20}"
        if scores is not None:
            header += f" {'Score':<10}"
        lines.append(self._colorize(header, Colors.BOLD))
        lines.append("-" * (36 if scores is not None else 25))

        for i, name in enumerate(names, 1):
            line = f"{i:<4} {name:<20}"
            if scores is not None:
                score = score_map.get(name, Fraction(0))
                line += f" {str(score):<10}"
            lines.append(line)

        lines.append(f"Total: {len(names)} profiles")
        return "\n".join(lines)

    def format_capabilities(
        self,
        record: CapabilityRecord,
        display: DisplayAnalysis | None = None,
    ) -> str:
        """Format a capability record and optional display analysis."""

        def flag(value: bool) -> str:
            if value:
                return self._colorize("yes", Colors.SUCCESS)
            return self._colorize("no", Colors.FAILURE)

        width, height = record.max_viewport_dims
        lines = [
            self._colorize("WebGL Capabilities", Colors.BOLD),
            f"  Version: WebGL {'2.0' if record.webgl2 else '1.0'}",
            f"  Float textures: {flag(record.float_textures)}",
            f"  Anisotropic filtering: {flag(record.anisotropic_filtering)}",
            f"  Instanced arrays: {flag(record.instanced_arrays)}",
            f"  Multi-draw indirect: {flag(record.multi_draw_indirect)}",
            f"  Max texture size: {record.max_texture_size}",
            f"  Max viewport: {width}x{height}",
        ]

        if display is not None:
            caps = display.capabilities
            res = display.resolution
            lines.append("")
            lines.append(self._colorize("Display", Colors.BOLD))
            lines.append(f"  Resolution: {res.width}x{res.height} (aspect {res.aspect_ratio:.2f})")
            lines.append(f"  Device pixel ratio: {display.device_pixel_ratio:g}")
            lines.append(f"  Max renderbuffer size: {caps.max_renderbuffer_size}")
            lines.append(f"  Color formats: {', '.join(caps.color_buffer_formats) or '(none)'}")
            lines.append(f"  HDR: {flag(caps.has_hdr)}")
            lines.append(f"  Depth textures: {flag(caps.has_depth_texture)}")
            lines.append(f"  Antialiasing: {', '.join(caps.antialiasing_modes)}")
            if display.recommendations:
                lines.append("\n  Recommendations:")
                for i, recommendation in enumerate(display.recommendations, 1):
                    lines.append(f"    {i}. {recommendation}")

        return "\n".join(lines)


class JsonFormatter(OutputFormatter):
    """JSON output formatter."""

    def __init__(self, indent: int = 2, compact: bool = False):
        """Initialize the JSON formatter.

        Args:
            indent: Indentation level
            compact: Whether to use compact output
        """
        self.indent = None if compact else indent

    def _serialize(self, obj: Any) -> Any:
        """Serialize an object for JSON output."""
        if isinstance(obj, Fraction):
            return float(obj)
        if isinstance(obj, tuple):
            return list(obj)
        return str(obj)

    def format_report(self, report: dict[str, Any]) -> str:
        """Format a detection report as JSON."""
        return json.dumps(report, indent=self.indent, default=self._serialize)

    def format_profile_list(
        self,
        names: list[str],
        scores: list[tuple[str, Fraction]] | None = None,
    ) -> str:
        """Format the registered profiles as JSON."""
        if scores is None:
            data: dict[str, Any] = {"count": len(names), "profiles": names}
        else:
            data = {
                "count": len(names),
                "profiles": [{"name": name, "score": float(score)} for name, score in scores],
            }
        return json.dumps(data, indent=self.indent, default=self._serialize)

    def format_capabilities(
        self,
        record: CapabilityRecord,
        display: DisplayAnalysis | None = None,
    ) -> str:
        """Format a capability record and optional display analysis as JSON."""
        data: dict[str, Any] = {"capabilities": record.to_dict()}
        if display is not None:
            data["display"] = display.to_dict()
        return json.dumps(data, indent=self.indent, default=self._serialize)


def get_formatter(output_format: str, use_colors: bool = True, verbose: bool = False) -> OutputFormatter:
    """Get a formatter by name ("text" or "json")."""
    if output_format == "json":
        return JsonFormatter()
    return TextFormatter(use_colors=use_colors, verbose=verbose)
