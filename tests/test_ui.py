"""Tests for the command line interface.

This module tests the CLI formatters, command handlers, and argument parser.
"""

import argparse
import json
import pytest
from fractions import Fraction
from pathlib import Path

from enginescope.classification.report import assemble_report
from enginescope.core.config import Config
from enginescope.core.models import (
    CapabilityRecord,
    ClassificationResult,
    DisplayAnalysis,
    DisplayCapabilities,
    Resolution,
)
from enginescope.ui.cli.commands import (
    EXIT_ERROR,
    EXIT_NO_ENGINE,
    EXIT_OK,
    parse_context_specs,
    run_detect_command,
    run_probe_command,
    run_profiles_command,
)
from enginescope.ui.cli.formatters import (
    Colors,
    JsonFormatter,
    TextFormatter,
    colorize,
    get_confidence_color,
    get_formatter,
)
from enginescope_cli import create_argument_parser, get_log_level


# Test fixtures

@pytest.fixture
def sample_report():
    """Create a sample detection report."""
    result = ClassificationResult(
        name="Unity",
        confidence=Fraction(2, 3),
        features=["WebGL rendering"],
        recommendations=["Enable WebGL 2.0 for better performance and features"],
        warnings=["GPU instancing not supported, performance may be impacted"],
        capabilities=CapabilityRecord(webgl2=True, max_texture_size=4096),
    )
    return assemble_report(result, source="index.html")


@pytest.fixture
def sample_record():
    """Create a sample capability record."""
    return CapabilityRecord(
        webgl2=True,
        float_textures=True,
        instanced_arrays=True,
        max_texture_size=16384,
        max_viewport_dims=(16384, 8192),
    )


@pytest.fixture
def sample_display():
    """Create a sample display analysis."""
    return DisplayAnalysis(
        resolution=Resolution(width=1920, height=1080, aspect_ratio=1920 / 1080),
        device_pixel_ratio=2.0,
        capabilities=DisplayCapabilities(
            max_renderbuffer_size=16384,
            color_buffer_formats=["RGBA8", "RGB8"],
            antialiasing_modes=["FXAA"],
        ),
        recommendations=["High DPI display detected (2x)."],
    )


@pytest.fixture
def config(tmp_path: Path):
    """Create a config rooted in a temporary directory."""
    config = Config(config_dir=tmp_path / "enginescope")
    config.output.use_colors = False
    return config


@pytest.fixture
def context_file(tmp_path: Path):
    """Write a WebGL 2 context descriptor."""
    path = tmp_path / "context.json"
    path.write_text(
        json.dumps(
            {
                "version": 2,
                "extensions": ["EXT_color_buffer_float"],
                "parameters": {
                    "MAX_TEXTURE_SIZE": 8192,
                    "MAX_VIEWPORT_DIMS": [8192, 8192],
                    "MAX_RENDERBUFFER_SIZE": 8192,
                },
            }
        )
    )
    return path


class TestColors:
    """Tests for color helpers."""

    def test_colorize_forced(self):
        """Test forced colorization."""
        assert colorize("text", Colors.BOLD, force=True) == f"{Colors.BOLD}text{Colors.RESET}"

    def test_confidence_colors(self):
        """Test confidence color thresholds."""
        assert get_confidence_color(1.0) == Colors.CONFIDENCE_HIGH
        assert get_confidence_color(0.5) == Colors.CONFIDENCE_MEDIUM
        assert get_confidence_color(0.25) == Colors.CONFIDENCE_LOW


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_format_report(self, sample_report):
        """Test formatting a detection report."""
        output = TextFormatter(use_colors=False).format_report(sample_report)

        assert "Document: index.html" in output
        assert "Engine: Unity (confidence 67%)" in output
        assert "+ WebGL rendering" in output
        assert "! GPU instancing not supported" in output
        assert "1. Enable WebGL 2.0" in output
        assert "WebGL Capabilities" not in output

    def test_format_report_verbose(self, sample_report):
        """Test that verbose output includes capabilities."""
        output = TextFormatter(use_colors=False, verbose=True).format_report(sample_report)

        assert "WebGL Capabilities" in output
        assert "maxTextureSize: 4096" in output

    def test_format_no_engine(self):
        """Test formatting a report without a detection."""
        output = TextFormatter(use_colors=False).format_report(assemble_report(None))
        assert output == "No engine detected"

    def test_format_profile_list(self):
        """Test formatting the profile list."""
        output = TextFormatter(use_colors=False).format_profile_list(["Unity", "Godot"])

        assert "Unity" in output
        assert "Godot" in output
        assert "Score" not in output
        assert "Total: 2 profiles" in output

    def test_format_profile_list_with_scores(self):
        """Test formatting the profile list with scores."""
        output = TextFormatter(use_colors=False).format_profile_list(
            ["Unity", "Godot"], [("Unity", Fraction(2, 3)), ("Godot", Fraction(0))]
        )

        assert "Score" in output
        assert "2/3" in output

    def test_format_empty_profile_list(self):
        """Test formatting an empty profile list."""
        assert TextFormatter(use_colors=False).format_profile_list([]) == "No profiles registered."

    def test_format_capabilities(self, sample_record, sample_display):
        """Test formatting capabilities and a display analysis."""
        output = TextFormatter(use_colors=False).format_capabilities(sample_record, sample_display)

        assert "Version: WebGL 2.0" in output
        assert "Float textures: yes" in output
        assert "Anisotropic filtering: no" in output
        assert "Max viewport: 16384x8192" in output
        assert "Resolution: 1920x1080 (aspect 1.78)" in output
        assert "Color formats: RGBA8, RGB8" in output
        assert "1. High DPI display detected (2x)." in output


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format_report(self, sample_report):
        """Test JSON report output."""
        data = json.loads(JsonFormatter().format_report(sample_report))

        assert data["detected"] is True
        assert data["name"] == "Unity"
        assert data["confidence"] == pytest.approx(2 / 3)
        assert data["capabilities"]["webgl2"] is True

    def test_compact(self, sample_report):
        """Test compact output."""
        output = JsonFormatter(compact=True).format_report(sample_report)
        assert "\n" not in output

    def test_format_profile_list(self):
        """Test JSON profile list output."""
        data = json.loads(JsonFormatter().format_profile_list(["Unity"]))
        assert data == {"count": 1, "profiles": ["Unity"]}

        data = json.loads(JsonFormatter().format_profile_list(["Unity"], [("Unity", Fraction(1, 2))]))
        assert data["profiles"] == [{"name": "Unity", "score": 0.5}]

    def test_format_capabilities(self, sample_record, sample_display):
        """Test JSON capability output."""
        data = json.loads(JsonFormatter().format_capabilities(sample_record, sample_display))

        assert data["capabilities"]["maxViewportDims"] == [16384, 8192]
        assert data["display"]["devicePixelRatio"] == 2.0

    def test_get_formatter(self):
        """Test formatter selection."""
        assert isinstance(get_formatter("json"), JsonFormatter)
        assert isinstance(get_formatter("text"), TextFormatter)


class TestParseContextSpecs:
    """Tests for --context argument parsing."""

    def test_parse(self, context_file):
        """Test parsing canvas=descriptor specs."""
        contexts = parse_context_specs([f"unity-canvas={context_file}", f"1={context_file}"])

        assert set(contexts) == {"unity-canvas", "1"}
        assert contexts["unity-canvas"].kind == "webgl2"

    def test_none(self):
        """Test that no specs give no contexts."""
        assert parse_context_specs(None) == {}

    def test_malformed(self):
        """Test that malformed specs are rejected."""
        with pytest.raises(ValueError):
            parse_context_specs(["unity-canvas"])
        with pytest.raises(ValueError):
            parse_context_specs(["=context.json"])


class TestDetectCommand:
    """Tests for the detect command."""

    def make_args(self, html_file: Path, **kwargs) -> argparse.Namespace:
        defaults = {
            "html_file": html_file,
            "context": None,
            "profiles": None,
            "json": False,
            "output": None,
            "verbose": 0,
        }
        defaults.update(kwargs)
        return argparse.Namespace(**defaults)

    def test_detect_text(self, tmp_path: Path, config, unity_html, capsys):
        """Test detecting an engine with text output."""
        html_file = tmp_path / "index.html"
        html_file.write_text(unity_html)

        exit_code = run_detect_command(self.make_args(html_file), config)

        assert exit_code == EXIT_OK
        assert "Engine: Unity" in capsys.readouterr().out

    def test_detect_json_with_context(self, tmp_path: Path, config, unity_html, context_file, capsys):
        """Test detecting with an attached context and JSON output."""
        html_file = tmp_path / "index.html"
        html_file.write_text(unity_html)

        exit_code = run_detect_command(
            self.make_args(html_file, context=[f"unity-canvas={context_file}"], json=True),
            config,
        )

        data = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_OK
        assert data["name"] == "Unity"
        assert data["confidence"] == 1.0
        assert data["capabilities"]["webgl2"] is True

    def test_detect_no_engine(self, tmp_path: Path, config, capsys):
        """Test the exit code when no engine is detected."""
        html_file = tmp_path / "plain.html"
        html_file.write_text("<html><body><p>Hello</p></body></html>")

        exit_code = run_detect_command(self.make_args(html_file), config)

        assert exit_code == EXIT_NO_ENGINE
        assert "No engine detected" in capsys.readouterr().out

    def test_detect_output_file(self, tmp_path: Path, config, bitsy_html):
        """Test writing the report to a file."""
        html_file = tmp_path / "bitsy.html"
        html_file.write_text(bitsy_html)
        output = tmp_path / "report.json"

        exit_code = run_detect_command(self.make_args(html_file, json=True, output=output), config)

        assert exit_code == EXIT_OK
        assert json.loads(output.read_text())["name"] == "Bitsy"

    def test_detect_missing_document(self, tmp_path: Path, config, capsys):
        """Test the exit code for a missing document."""
        exit_code = run_detect_command(self.make_args(tmp_path / "missing.html"), config)

        assert exit_code == EXIT_ERROR
        assert "Error:" in capsys.readouterr().out

    def test_detect_unknown_canvas(self, tmp_path: Path, config, unity_html, context_file):
        """Test the exit code when a context targets a missing canvas."""
        html_file = tmp_path / "index.html"
        html_file.write_text(unity_html)

        exit_code = run_detect_command(
            self.make_args(html_file, context=[f"other-canvas={context_file}"]), config
        )

        assert exit_code == EXIT_ERROR

    def test_detect_extra_profiles(self, tmp_path: Path, config, capsys):
        """Test detection with an extra profile file."""
        profile_file = tmp_path / "profiles.json"
        profile_file.write_text(
            json.dumps(
                [
                    {
                        "name": "Defold",
                        "signatures": [{"type": "script", "patterns": ["dmloader"]}],
                        "recommendations": ["Enable texture compression"],
                    }
                ]
            )
        )
        html_file = tmp_path / "index.html"
        html_file.write_text('<script src="dmloader.js"></script>')

        exit_code = run_detect_command(self.make_args(html_file, profiles=profile_file), config)

        assert exit_code == EXIT_OK
        assert "Engine: Defold" in capsys.readouterr().out

    def test_detect_with_2d_context(self, tmp_path: Path, config, capsys):
        """Test attaching a 2D context to a PuzzleScript canvas."""
        html_file = tmp_path / "puzzle.html"
        html_file.write_text(
            '<div id="gameWrapper">'
            '<canvas id="gameCanvas" style="image-rendering: pixelated"></canvas>'
            "</div>"
            '<script>var levelString = "";</script>'
        )
        descriptor = tmp_path / "2d.json"
        descriptor.write_text(json.dumps({"kind": "2d"}))

        exit_code = run_detect_command(
            self.make_args(html_file, context=[f"gameCanvas={descriptor}"], json=True), config
        )

        data = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_OK
        assert data["name"] == "PuzzleScript"
        assert data["warnings"] == []

    def test_detect_missing_profiles_file(self, tmp_path: Path, config, unity_html, capsys):
        """Test that a named profile file that doesn't exist is an input error."""
        html_file = tmp_path / "index.html"
        html_file.write_text(unity_html)

        exit_code = run_detect_command(
            self.make_args(html_file, profiles=tmp_path / "missing.json"), config
        )

        output = capsys.readouterr().out
        assert exit_code == EXIT_ERROR
        assert "Error:" in output
        assert "Engine: Unity" not in output

    def test_detect_malformed_profiles_file(self, tmp_path: Path, config, unity_html, capsys):
        """Test that a profile file with a non-object entry is an input error."""
        html_file = tmp_path / "index.html"
        html_file.write_text(unity_html)
        profile_file = tmp_path / "profiles.json"
        profile_file.write_text("[1]")

        exit_code = run_detect_command(self.make_args(html_file, profiles=profile_file), config)

        assert exit_code == EXIT_ERROR
        assert "Profile [0]" in capsys.readouterr().out


class TestProfilesCommand:
    """Tests for the profiles command."""

    def test_list(self, config, capsys):
        """Test listing the builtin profiles."""
        args = argparse.Namespace(scores=None, context=None, profiles=None, json=True, verbose=0)

        exit_code = run_profiles_command(args, config)

        data = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_OK
        assert data["count"] == 10
        assert data["profiles"][0] == "Unity"

    def test_scores(self, tmp_path: Path, config, bitsy_html, capsys):
        """Test scoring the builtin profiles against a document."""
        html_file = tmp_path / "bitsy.html"
        html_file.write_text(bitsy_html)
        args = argparse.Namespace(
            scores=html_file, context=None, profiles=None, json=True, verbose=0
        )

        exit_code = run_profiles_command(args, config)

        data = json.loads(capsys.readouterr().out)
        scores = {entry["name"]: entry["score"] for entry in data["profiles"]}
        assert exit_code == EXIT_OK
        assert scores["Bitsy"] == 1.0
        assert scores["Unity"] == 0.0


class TestProbeCommand:
    """Tests for the probe command."""

    def test_probe(self, config, context_file, capsys):
        """Test probing a context descriptor."""
        args = argparse.Namespace(
            descriptor=context_file, width=None, height=None, dpr=None, json=True, verbose=0
        )

        exit_code = run_probe_command(args, config)

        data = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_OK
        assert data["capabilities"]["webgl2"] is True
        assert data["capabilities"]["maxTextureSize"] == 8192
        assert "display" not in data

    def test_probe_with_display(self, config, context_file, capsys):
        """Test probing with display analysis."""
        args = argparse.Namespace(
            descriptor=context_file, width=1920, height=1080, dpr=2.0, json=True, verbose=0
        )

        exit_code = run_probe_command(args, config)

        data = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_OK
        assert data["display"]["displayCapabilities"]["hasHDR"] is True
        assert data["display"]["devicePixelRatio"] == 2.0

    def test_probe_missing_descriptor(self, tmp_path: Path, config):
        """Test probing a missing descriptor."""
        args = argparse.Namespace(
            descriptor=tmp_path / "missing.json", width=None, height=None, dpr=None, json=False
        )
        assert run_probe_command(args, config) == EXIT_ERROR

    def test_probe_2d_descriptor(self, tmp_path: Path, config, capsys):
        """Test that probing a 2D context is reported as an error."""
        descriptor = tmp_path / "2d.json"
        descriptor.write_text(json.dumps({"kind": "2d"}))
        args = argparse.Namespace(
            descriptor=descriptor, width=None, height=None, dpr=None, json=False
        )

        assert run_probe_command(args, config) == EXIT_ERROR
        assert "Error:" in capsys.readouterr().out


class TestArgumentParser:
    """Tests for the argument parser."""

    def test_detect_arguments(self):
        """Test parsing detect arguments."""
        args = create_argument_parser().parse_args(
            ["detect", "index.html", "-c", "0=a.json", "-c", "game=b.json", "--json"]
        )

        assert args.command == "detect"
        assert args.html_file == Path("index.html")
        assert args.context == ["0=a.json", "game=b.json"]
        assert args.json is True

    def test_probe_arguments(self):
        """Test parsing probe arguments."""
        args = create_argument_parser().parse_args(
            ["probe", "ctx.json", "--width", "800", "--height", "600", "--dpr", "1.5"]
        )

        assert args.width == 800
        assert args.height == 600
        assert args.dpr == 1.5

    def test_log_level(self):
        """Test verbosity to log level mapping."""
        import logging

        assert get_log_level(0) == logging.WARNING
        assert get_log_level(1) == logging.INFO
        assert get_log_level(2) == logging.DEBUG
