"""Profile Registry - Candidate engine profiles.

This module defines engine profiles (named bundles of signatures, static
recommendations, and a deep-analysis routine), the read-only registry that
holds them in registration order, and the builtin profiles for common web
game engines.

Registration order is significant: the classifier resolves equal scores in
favour of the earlier profile, so more specific profiles come first.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from enginescope.classification.capabilities import CapabilityProber
from enginescope.classification.signatures import get_webgl_context
from enginescope.core.exceptions import ContextUnavailableError, ProfileConfigurationError
from enginescope.core.models import (
    CanvasElement,
    CanvasPattern,
    CapabilityRecord,
    CanvasSize,
    DocumentSnapshot,
    DomPattern,
    HtmlSubstring,
    ScriptPattern,
    Signature,
    WebGLProbe,
)

logger = logging.getLogger("enginescope.classification.profiles")


class DeepAnalyzer(ABC):
    """Profile-specific checks run against the winning candidate.

    Analyzers must be read-only with respect to the snapshot and must not
    fail when no rendering context is available; capability checks are
    simply skipped in that case.
    """

    @abstractmethod
    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        """Run the checks and return warning strings."""
        pass


class NullAnalyzer(DeepAnalyzer):
    """Analyzer that never produces warnings."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        return []


@dataclass(frozen=True)
class EngineProfile:
    """A candidate engine identity.

    Attributes:
        name: Unique engine name
        signatures: Signatures checked against a snapshot
        recommendations: Static tuning recommendations
        analyzer: Deep-analysis routine for this engine
    """

    name: str
    signatures: tuple[Signature, ...]
    recommendations: tuple[str, ...]
    analyzer: DeepAnalyzer = NullAnalyzer()

    def deep_analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        """Run this profile's deep analysis."""
        return self.analyzer.analyze(snapshot, prober)


class ProfileRegistry:
    """Ordered, read-only set of engine profiles.

    Profiles are validated when the registry is built; a malformed profile
    is a configuration error and is never deferred to classification time.

    Example:
        registry = ProfileRegistry([unity_profile, godot_profile])
        for profile in registry:
            print(profile.name)
    """

    def __init__(self, profiles: Iterable[EngineProfile]) -> None:
        """Build the registry.

        Args:
            profiles: Profiles in registration order.

        Raises:
            ProfileConfigurationError: If a profile has no signatures, no
                recommendations, or a duplicate name.
        """
        self._profiles: tuple[EngineProfile, ...] = tuple(profiles)
        self._by_name: dict[str, EngineProfile] = {}

        for profile in self._profiles:
            self._validate(profile)
            self._by_name[profile.name] = profile

        logger.debug(f"Registry built with {len(self._profiles)} profiles")

    def _validate(self, profile: EngineProfile) -> None:
        if not profile.name:
            raise ProfileConfigurationError("Engine profile must have a name")
        if not profile.signatures:
            raise ProfileConfigurationError(f"Engine profile '{profile.name}' has no signatures")
        if not profile.recommendations:
            raise ProfileConfigurationError(
                f"Engine profile '{profile.name}' has no recommendations"
            )
        if profile.name in self._by_name:
            raise ProfileConfigurationError(f"Duplicate engine profile name: '{profile.name}'")

    def __iter__(self) -> Iterator[EngineProfile]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def names(self) -> list[str]:
        """Profile names in registration order."""
        return [profile.name for profile in self._profiles]

    def get(self, name: str) -> EngineProfile | None:
        """Get a profile by name."""
        return self._by_name.get(name)

    def with_profiles(self, profiles: Iterable[EngineProfile]) -> "ProfileRegistry":
        """Return a new registry with extra profiles registered after these."""
        return ProfileRegistry([*self._profiles, *profiles])


# ---------------------------------------------------------------------------
# Declarative profile files
# ---------------------------------------------------------------------------


def _parse_patterns(data: dict[str, Any], prefix: str) -> tuple[str, ...]:
    """Parse a signature's pattern list."""
    patterns = data.get("patterns", [])
    if not isinstance(patterns, list) or not all(isinstance(p, str) and p for p in patterns):
        raise ProfileConfigurationError(f"{prefix}: patterns must be a list of non-empty strings")
    return tuple(patterns)


def _parse_size(data: dict[str, Any], prefix: str) -> tuple[int, int] | None:
    """Parse a signature's optional canvas size."""
    size = data.get("size")
    if size is None:
        return None
    if not isinstance(size, dict):
        raise ProfileConfigurationError(f"{prefix}: size must be an object with width and height")

    dimensions = []
    for key in ("width", "height"):
        value = size.get(key)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ProfileConfigurationError(f"{prefix}: size.{key} must be a positive integer")
        dimensions.append(value)
    return dimensions[0], dimensions[1]


def _parse_signature(data: Any, prefix: str) -> Signature:
    """Parse one declarative signature."""
    if not isinstance(data, dict):
        raise ProfileConfigurationError(f"{prefix}: signature must be an object")

    sig_type = str(data.get("type", "")).lower()

    if sig_type in ("dom", "script", "html"):
        patterns = _parse_patterns(data, prefix)
        if not patterns:
            raise ProfileConfigurationError(
                f"{prefix}: '{sig_type}' signature needs at least one pattern"
            )
        if sig_type == "dom":
            return DomPattern(patterns=patterns)
        elif sig_type == "script":
            return ScriptPattern(patterns=patterns)
        return HtmlSubstring(patterns=patterns)
    elif sig_type == "canvas":
        patterns = _parse_patterns(data, prefix)
        size = _parse_size(data, prefix)
        if size is None:
            return CanvasPattern(patterns=patterns)
        return CanvasPattern(patterns=patterns, width=size[0], height=size[1])
    elif sig_type == "canvas_size":
        size = _parse_size(data, prefix)
        if size is None:
            raise ProfileConfigurationError(f"{prefix}: canvas_size signature needs a size")
        return CanvasSize(width=size[0], height=size[1])
    elif sig_type == "webgl":
        shaders = data.get("shaders", [])
        if not isinstance(shaders, list) or not all(isinstance(s, str) for s in shaders):
            raise ProfileConfigurationError(f"{prefix}: shaders must be a list of strings")
        return WebGLProbe(
            require_context=bool(data.get("requireContext", True)),
            shaders=tuple(shaders),
        )

    raise ProfileConfigurationError(f"{prefix}: unknown signature type '{sig_type}'")


def _parse_profile(data: Any, index: int) -> EngineProfile:
    """Parse one declarative profile."""
    if not isinstance(data, dict):
        raise ProfileConfigurationError(f"Profile [{index}]: must be an object")

    name = data.get("name", "")
    if not isinstance(name, str):
        raise ProfileConfigurationError(f"Profile [{index}]: name must be a string")
    prefix = f"Engine profile '{name}'" if name else f"Profile [{index}]"

    signatures_data = data.get("signatures", [])
    if not isinstance(signatures_data, list):
        raise ProfileConfigurationError(f"{prefix}: signatures must be a list")
    recommendations = data.get("recommendations", [])
    if not isinstance(recommendations, list) or not all(
        isinstance(r, str) for r in recommendations
    ):
        raise ProfileConfigurationError(f"{prefix}: recommendations must be a list of strings")

    signatures = tuple(
        _parse_signature(sig, f"{prefix} signature [{i}]")
        for i, sig in enumerate(signatures_data)
    )
    return EngineProfile(
        name=name,
        signatures=signatures,
        recommendations=tuple(recommendations),
    )


def load_profiles_from_file(file_path: Path) -> list[EngineProfile]:
    """Load declarative engine profiles from a JSON file.

    The file holds either an array of profiles or an object with a
    ``profiles`` key. Declarative profiles carry no deep analysis.

    Args:
        file_path: Path to the profile JSON file.

    Returns:
        Parsed profiles in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON is invalid.
        ProfileConfigurationError: If a signature is malformed.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Profile file not found: {file_path}")

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in profile file: {e}") from e

    if isinstance(data, list):
        profiles_data = data
        version = "unknown"
    elif isinstance(data, dict):
        profiles_data = data.get("profiles", [])
        version = data.get("version", "unknown")
    else:
        raise ValueError("Invalid profile file format")

    if not isinstance(profiles_data, list):
        raise ProfileConfigurationError("Profile file 'profiles' must be a list")

    profiles = [_parse_profile(item, i) for i, item in enumerate(profiles_data)]
    logger.info(f"Loaded {len(profiles)} profiles from {file_path} (version: {version})")
    return profiles


# ---------------------------------------------------------------------------
# Builtin deep analyzers
# ---------------------------------------------------------------------------


def _probe_canvas(
    canvas: CanvasElement | None, prober: CapabilityProber
) -> CapabilityRecord | None:
    """Probe the WebGL context of a canvas, or return None if there is none."""
    if canvas is None:
        return None
    context = get_webgl_context(canvas)
    if context is None:
        return None
    try:
        return prober.probe(context)
    except ContextUnavailableError:
        return None


def _has_webgl(canvas: CanvasElement, kinds: tuple[str, ...] = ("webgl", "webgl2")) -> bool:
    return any(canvas.get_context(kind) is not None for kind in kinds)


class UnityAnalyzer(DeepAnalyzer):
    """Unity WebGL build checks."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.find_canvas("unity-canvas")
        if canvas is None:
            return warnings

        capabilities = _probe_canvas(canvas, prober)
        if capabilities:
            if not capabilities.webgl2:
                warnings.append("WebGL 2.0 not available, falling back to WebGL 1.0")
            if not capabilities.instanced_arrays:
                warnings.append("GPU instancing not supported, performance may be impacted")
            if capabilities.max_texture_size < 4096:
                warnings.append("Limited texture size support, consider texture atlasing")
        return warnings


class GodotAnalyzer(DeepAnalyzer):
    """Godot HTML5 export checks."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.find_canvas("godot-canvas")
        if canvas is None:
            return warnings

        capabilities = _probe_canvas(canvas, prober)
        if capabilities:
            if not capabilities.webgl2:
                warnings.append("WebGL 2.0 not available, GLES3 features will be limited")
            if not capabilities.float_textures:
                warnings.append("Float textures not supported, HDR effects will be limited")
            if capabilities.max_texture_size < 8192:
                warnings.append("Limited texture size, consider enabling texture streaming")

        if not snapshot.exists('meta[name="viewport"]'):
            warnings.append("Viewport meta tag not found, mobile scaling may be incorrect")

        # Threads need cross-origin isolation (COOP + COEP)
        if not snapshot.exists('meta[http-equiv="Cross-Origin-Embedder-Policy" i]'):
            warnings.append("Cross-Origin Isolation not enabled, threading unavailable")
        return warnings


class ConstructAnalyzer(DeepAnalyzer):
    """Construct 2/3 export checks."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.first_canvas()
        if canvas is None:
            return warnings

        if get_webgl_context(canvas) is None:
            warnings.append("WebGL not available, falling back to Canvas2D")
            return warnings

        capabilities = _probe_canvas(canvas, prober)
        if capabilities:
            if not capabilities.instanced_arrays:
                warnings.append("Instancing not supported, sprite batching will be limited")
            if not capabilities.anisotropic_filtering:
                warnings.append(
                    "Anisotropic filtering not available, texture quality may be reduced"
                )
        return warnings


class GDevelopAnalyzer(DeepAnalyzer):
    """GDevelop export checks."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.find_canvas("game-canvas")
        if canvas is None:
            return warnings

        if canvas.get_context("webgl") is None:
            warnings.append("WebGL not available, performance may be impacted")
        if not snapshot.exists('meta[name="viewport"][content*="user-scalable=no"]'):
            warnings.append("Mobile viewport not properly configured")
        return warnings


class BitsyAnalyzer(DeepAnalyzer):
    """Bitsy export checks."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.first_canvas()
        if canvas is None:
            return warnings

        if canvas.width != 512 or canvas.height != 512:
            warnings.append("Non-standard Bitsy canvas size detected")
        if not canvas.has_style("image-rendering"):
            warnings.append("Pixel-perfect scaling not enabled")
        return warnings


class TwineAnalyzer(DeepAnalyzer):
    """Twine story format checks."""

    # Passage count above which rendering slows down noticeably
    MAX_PASSAGES = 100

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        if len(snapshot.select(".passage, .tw-passage")) > self.MAX_PASSAGES:
            warnings.append("Large number of passages may impact performance")
        if not snapshot.exists('[role="main"]'):
            warnings.append("Missing ARIA roles for accessibility")
        return warnings


class FantasyConsoleAnalyzer(DeepAnalyzer):
    """Checks shared by fixed-resolution fantasy consoles (PICO-8, TIC-80)."""

    def __init__(self, console: str, width: int, height: int) -> None:
        self.console = console
        self.width = width
        self.height = height

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.first_canvas()
        if canvas is None:
            return warnings

        if not _has_webgl(canvas):
            warnings.append("WebGL not available, using Canvas 2D fallback")
        if canvas.width != self.width or canvas.height != self.height:
            warnings.append(f"Non-standard {self.console} resolution detected")
        return warnings


class PuzzleScriptAnalyzer(DeepAnalyzer):
    """PuzzleScript export checks."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.find_canvas("gameCanvas")
        if canvas is None:
            return warnings

        if canvas.get_context("2d") is None:
            warnings.append("Canvas 2D context not available")
        if not canvas.has_style("image-rendering"):
            warnings.append("Pixel-perfect rendering not enabled")
        return warnings


class P5Analyzer(DeepAnalyzer):
    """p5.js sketch checks."""

    def analyze(self, snapshot: DocumentSnapshot, prober: CapabilityProber) -> list[str]:
        warnings: list[str] = []
        canvas = snapshot.first_canvas()
        if canvas is None:
            return warnings

        sketch_text = "".join(
            script.text or "" for script in snapshot.scripts if script.src and "p5" in script.src
        )
        if canvas.get_context("webgl") is None and "WEBGL" in sketch_text:
            warnings.append("WebGL mode requested but not available")
        if "preload" not in sketch_text:
            warnings.append("preload() function not detected for asset loading")
        return warnings


# ---------------------------------------------------------------------------
# Builtin profiles
# ---------------------------------------------------------------------------


def _builtin_profiles() -> list[EngineProfile]:
    return [
        EngineProfile(
            name="Unity",
            signatures=(
                ScriptPattern(patterns=("UnityLoader", "UnityProgress", "buildUrl")),
                WebGLProbe(),
                HtmlSubstring(patterns=("unity-fullscreen-button", "unity-mobile-warning")),
            ),
            recommendations=(
                "Enable WebGL 2.0 for better performance and features",
                "Implement texture compression (DXT/ASTC) for faster loading",
                "Use Unity's progressive loading for large assets",
                "Enable memory defragmentation for WebGL builds",
                "Implement WebAssembly builds for better performance",
                "Configure proper mobile touch input handling",
                "Enable GPU instancing for repeated objects",
                "Use occlusion culling for complex scenes",
                "Implement LOD system for detailed models",
            ),
            analyzer=UnityAnalyzer(),
        ),
        EngineProfile(
            name="Godot",
            signatures=(
                ScriptPattern(patterns=("GDJS", "godot.js", "godot.wasm")),
                CanvasPattern(patterns=("godot-canvas",)),
            ),
            recommendations=(
                "Enable GLES3 mode for better WebGL 2.0 support",
                "Use Godot's built-in compression for assets",
                "Enable threading for WebAssembly builds",
                "Implement proper viewport handling for mobile",
                'Use viewport stretch mode "2d" for pixel-perfect rendering',
                "Enable HDR when using post-processing effects",
                "Use GPU particles for better performance",
                "Enable texture streaming for large textures",
                "Implement proper batching for 2D sprites",
            ),
            analyzer=GodotAnalyzer(),
        ),
        EngineProfile(
            name="Construct",
            signatures=(
                ScriptPattern(patterns=("c2runtime", "c3runtime", "construct")),
                CanvasPattern(patterns=("construct-canvas",)),
            ),
            recommendations=(
                "Enable WebGL renderer for better performance",
                "Use texture atlases to reduce draw calls",
                "Enable object pooling for particle effects",
                "Implement proper touch controls for mobile",
                "Use compressed textures when available",
                "Enable worker threads for physics calculations",
                "Implement layer effects optimization",
                "Use zone culling for large levels",
                "Enable background loading for assets",
            ),
            analyzer=ConstructAnalyzer(),
        ),
        EngineProfile(
            name="GDevelop",
            signatures=(
                ScriptPattern(patterns=("gdjs", "runtimeGame", "runtimeScene")),
                CanvasPattern(patterns=("game-canvas",)),
            ),
            recommendations=(
                "Enable WebGL renderer in project settings",
                "Use texture packing for sprites",
                "Implement object pooling for particles",
                "Enable multi-threading when available",
                "Use compressed assets for faster loading",
                "Implement proper mobile touch handling",
            ),
            analyzer=GDevelopAnalyzer(),
        ),
        EngineProfile(
            name="Bitsy",
            signatures=(
                CanvasSize(width=512, height=512),
                ScriptPattern(patterns=("bitsy_title_text", "bitsyOnLoad", "exportedGameData")),
                HtmlSubstring(patterns=("bitsy-gamedata", "gameDataOnLoad")),
            ),
            recommendations=(
                "Enable pixel-perfect scaling for best visual quality",
                "Implement touch input support for mobile devices",
                "Verify canvas resolution matches Bitsy's native size (512x512)",
                "Consider adding a loading indicator for game data",
            ),
            analyzer=BitsyAnalyzer(),
        ),
        EngineProfile(
            name="Twine",
            signatures=(
                DomPattern(patterns=("passage", "tw-story", "tw-sidebar", "tw-passage")),
                ScriptPattern(patterns=("SugarCube", "Harlowe", "Snowman", "Story.lookup")),
            ),
            recommendations=(
                "Ensure proper text rendering and scaling",
                "Implement accessibility features (ARIA labels, keyboard navigation)",
                "Add save/load functionality",
                "Consider mobile-friendly UI adjustments",
            ),
            analyzer=TwineAnalyzer(),
        ),
        EngineProfile(
            name="PICO-8",
            signatures=(
                CanvasSize(width=128, height=128),
                ScriptPattern(patterns=("_pico8_", "pico8_gpio", "pico8_buttons")),
                WebGLProbe(shaders=("pico8_vert", "pico8_frag")),
            ),
            recommendations=(
                "Implement WebGL with Canvas 2D fallback",
                "Enable pixel-perfect scaling for authentic look",
                "Monitor cartridge size (stay within 32kb limit)",
                "Add touch controls for mobile support",
            ),
            analyzer=FantasyConsoleAnalyzer("PICO-8", 128, 128),
        ),
        EngineProfile(
            name="PuzzleScript",
            signatures=(
                CanvasPattern(patterns=("gameCanvas",)),
                ScriptPattern(patterns=("levelString", "processInput", "titleScreen")),
                HtmlSubstring(patterns=("gameWrapper", "gameContainer")),
            ),
            recommendations=(
                "Optimize rule processing for complex puzzles",
                "Implement undo/redo functionality",
                "Add level select capability",
                "Consider mobile touch controls",
            ),
            analyzer=PuzzleScriptAnalyzer(),
        ),
        EngineProfile(
            name="TIC-80",
            signatures=(
                CanvasSize(width=240, height=136),
                ScriptPattern(patterns=("TIC", "tic80", "tic")),
                WebGLProbe(shaders=("tic_vert", "tic_frag")),
            ),
            recommendations=(
                "Verify 240x136 resolution compliance",
                "Implement WebGL with Canvas 2D fallback",
                "Add touch controls for mobile support",
                "Monitor CPU usage for complex games",
            ),
            analyzer=FantasyConsoleAnalyzer("TIC-80", 240, 136),
        ),
        EngineProfile(
            name="p5.js",
            signatures=(
                ScriptPattern(patterns=("p5.", "setup()", "draw()")),
                CanvasPattern(patterns=("defaultCanvas",)),
            ),
            recommendations=(
                "Use WebGL mode for 3D or complex 2D graphics",
                "Enable p5.js performance optimizations",
                "Implement proper frame rate management",
                "Use preload() for asset loading",
                "Consider using instance mode for better control",
            ),
            analyzer=P5Analyzer(),
        ),
    ]


def create_default_registry(extra_profiles_path: Path | None = None) -> ProfileRegistry:
    """Create the registry of builtin engine profiles.

    Args:
        extra_profiles_path: Optional declarative profile file whose
            profiles are registered after the builtin ones.

    Returns:
        Configured ProfileRegistry.
    """
    registry = ProfileRegistry(_builtin_profiles())

    if extra_profiles_path is not None:
        registry = registry.with_profiles(load_profiles_from_file(extra_profiles_path))

    return registry
