"""Core data models for EngineScope.

This module defines the enums, data classes, and type definitions used
throughout the application: the read-only document snapshot that is
inspected, the typed engine signatures, the capability record produced by
the capability prober, and the classification result.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bs4 import BeautifulSoup, Tag

    from enginescope.core.context import RenderingContext


class SignatureKind(Enum):
    """Kinds of engine signatures."""

    DOM = "dom"  # Element class/id/data-attribute
    SCRIPT = "script"  # Script inline text or src
    CANVAS = "canvas"  # Canvas id/class or explicit size
    CANVAS_SIZE = "canvas_size"  # Exact canvas dimensions
    HTML = "html"  # Raw markup substring
    WEBGL = "webgl"  # WebGL context obtainable


@dataclass(frozen=True)
class ScriptElement:
    """A <script> element of the inspected document.

    Attributes:
        text: Inline script text, if any
        src: Source reference (the src attribute), if any
    """

    text: str | None = None
    src: str | None = None


@dataclass(frozen=True)
class CanvasElement:
    """A <canvas> element of the inspected document.

    Attributes:
        width: Canvas width in pixels (300 when unspecified)
        height: Canvas height in pixels (150 when unspecified)
        element_id: The id attribute ("" if none)
        classes: Class list
        style: Inline style declarations, property name -> value
        attributes: Remaining element attributes
        contexts: Rendering contexts obtainable from this canvas, by kind
    """

    width: int = 300
    height: int = 150
    element_id: str = ""
    classes: tuple[str, ...] = ()
    style: Mapping[str, str] = field(default_factory=dict)
    attributes: Mapping[str, str] = field(default_factory=dict)
    contexts: Mapping[str, "RenderingContext"] = field(default_factory=dict, repr=False)

    @property
    def class_name(self) -> str:
        """The class list joined the way the DOM className reads."""
        return " ".join(self.classes)

    def get_context(self, kind: str) -> "RenderingContext | None":
        """Return the rendering context of the given kind, if obtainable."""
        return self.contexts.get(kind)

    def has_style(self, name: str) -> bool:
        """Check whether an inline style property is set."""
        return bool(self.style.get(name))


@dataclass(frozen=True)
class DocumentSnapshot:
    """Read-only view of a document at inspection time.

    A snapshot is created once per inspection request by an external
    parser (see ``enginescope.core.snapshot.build_snapshot``) and is never
    mutated afterwards. The element tree is only reachable through the
    query methods below.

    Attributes:
        scripts: Script elements in document order
        canvases: Canvas elements in document order
    """

    scripts: tuple[ScriptElement, ...] = ()
    canvases: tuple[CanvasElement, ...] = ()
    root: "BeautifulSoup | None" = field(default=None, repr=False, compare=False)

    @classmethod
    def empty(cls) -> "DocumentSnapshot":
        """Create a snapshot with no elements, scripts, or canvases."""
        return cls()

    @property
    def markup(self) -> str:
        """Serialized inner markup of the document root element."""
        if self.root is None:
            return ""
        html = self.root.find("html")
        if html is not None:
            return html.decode_contents()
        return self.root.decode_contents()

    def select(self, selector: str) -> list["Tag"]:
        """Return all elements matching a CSS selector."""
        if self.root is None:
            return []
        return list(self.root.select(selector))

    def select_one(self, selector: str) -> "Tag | None":
        """Return the first element matching a CSS selector."""
        if self.root is None:
            return None
        return self.root.select_one(selector)

    def exists(self, selector: str) -> bool:
        """Check whether any element matches a CSS selector."""
        return self.select_one(selector) is not None

    def has_class(self, name: str) -> bool:
        """Check whether any element carries the given class."""
        if self.root is None:
            return False
        return self.root.find(class_=name) is not None

    def has_id(self, name: str) -> bool:
        """Check whether any element has the given id."""
        if self.root is None:
            return False
        return self.root.find(id=name) is not None

    def has_data_attribute(self, name: str) -> bool:
        """Check whether any element has a ``data-<name>`` attribute."""
        if self.root is None:
            return False
        return self.root.find(attrs={f"data-{name}": True}) is not None

    def first_canvas(self) -> CanvasElement | None:
        """Return the first canvas in document order."""
        return self.canvases[0] if self.canvases else None

    def find_canvas(self, element_id: str) -> CanvasElement | None:
        """Return the first canvas with the given id."""
        for canvas in self.canvases:
            if canvas.element_id == element_id:
                return canvas
        return None


@dataclass(frozen=True)
class Signature:
    """Base class for a typed engine signature."""

    @property
    def kind(self) -> SignatureKind:
        raise NotImplementedError


@dataclass(frozen=True)
class DomPattern(Signature):
    """Matches an element by class, id, or ``data-`` attribute."""

    patterns: tuple[str, ...] = ()

    @property
    def kind(self) -> SignatureKind:
        return SignatureKind.DOM


@dataclass(frozen=True)
class ScriptPattern(Signature):
    """Matches a substring of any script's text or src."""

    patterns: tuple[str, ...] = ()

    @property
    def kind(self) -> SignatureKind:
        return SignatureKind.SCRIPT


@dataclass(frozen=True)
class CanvasPattern(Signature):
    """Matches a canvas by size, by id/class substring, or by presence."""

    patterns: tuple[str, ...] = ()
    width: int | None = None
    height: int | None = None

    @property
    def kind(self) -> SignatureKind:
        return SignatureKind.CANVAS

    @property
    def has_size(self) -> bool:
        return self.width is not None and self.height is not None


@dataclass(frozen=True)
class CanvasSize(Signature):
    """Matches a canvas with exactly the given dimensions."""

    width: int
    height: int

    @property
    def kind(self) -> SignatureKind:
        return SignatureKind.CANVAS_SIZE


@dataclass(frozen=True)
class HtmlSubstring(Signature):
    """Matches a substring of the serialized document markup."""

    patterns: tuple[str, ...] = ()

    @property
    def kind(self) -> SignatureKind:
        return SignatureKind.HTML


@dataclass(frozen=True)
class WebGLProbe(Signature):
    """Matches when a WebGL context can be obtained from a canvas.

    Attributes:
        require_context: When False, canvas presence alone matches
        shaders: Shader names associated with the engine (informational)
    """

    require_context: bool = True
    shaders: tuple[str, ...] = ()

    @property
    def kind(self) -> SignatureKind:
        return SignatureKind.WEBGL


@dataclass(frozen=True)
class CapabilityRecord:
    """Supported feature set and limits of a WebGL context.

    Attributes:
        webgl2: Whether the context is WebGL 2
        float_textures: OES_texture_float available
        anisotropic_filtering: Anisotropic filtering extension available
        instanced_arrays: Instanced drawing available
        multi_draw_indirect: Multi-draw-indirect available
        max_texture_size: MAX_TEXTURE_SIZE
        max_viewport_dims: MAX_VIEWPORT_DIMS as (width, height)
    """

    webgl2: bool = False
    float_textures: bool = False
    anisotropic_filtering: bool = False
    instanced_arrays: bool = False
    multi_draw_indirect: bool = False
    max_texture_size: int = 0
    max_viewport_dims: tuple[int, int] = (0, 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {
            "webgl2": self.webgl2,
            "floatTextures": self.float_textures,
            "anisotropicFiltering": self.anisotropic_filtering,
            "instancedArrays": self.instanced_arrays,
            "multiDrawIndirect": self.multi_draw_indirect,
            "maxTextureSize": self.max_texture_size,
            "maxViewportDims": list(self.max_viewport_dims),
        }


@dataclass
class ClassificationResult:
    """Result of classifying a document snapshot.

    Attributes:
        name: Name of the winning engine profile
        confidence: Fraction of the profile's signatures that matched
        features: Detected feature strings
        recommendations: The profile's static recommendations
        warnings: Warnings produced by the profile's deep analysis
        capabilities: Capability record of the probed canvas, if requested
    """

    name: str
    confidence: Fraction
    features: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    capabilities: CapabilityRecord | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the externally consumed result shape."""
        data: dict[str, Any] = {
            "name": self.name,
            "confidence": float(self.confidence),
            "features": list(self.features),
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
        }
        if self.capabilities is not None:
            data["capabilities"] = self.capabilities.to_dict()
        return data


@dataclass(frozen=True)
class Resolution:
    """Canvas resolution."""

    width: int
    height: int
    aspect_ratio: float


@dataclass
class DisplayCapabilities:
    """Display-related limits and formats of a WebGL context."""

    max_texture_size: int = 0
    max_viewport_dims: tuple[int, int] = (0, 0)
    max_renderbuffer_size: int = 0
    color_buffer_formats: list[str] = field(default_factory=list)
    has_hdr: bool = False
    has_float_textures: bool = False
    has_depth_texture: bool = False
    antialiasing_modes: list[str] = field(default_factory=list)


@dataclass
class DisplayAnalysis:
    """Display analysis of a canvas and its WebGL context.

    Attributes:
        resolution: Canvas resolution and aspect ratio
        device_pixel_ratio: Device pixel ratio the canvas is displayed at
        capabilities: Display capabilities of the context
        recommendations: Display-specific recommendations
    """

    resolution: Resolution
    device_pixel_ratio: float
    capabilities: DisplayCapabilities
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        caps = self.capabilities
        return {
            "resolution": {
                "width": self.resolution.width,
                "height": self.resolution.height,
                "aspectRatio": self.resolution.aspect_ratio,
            },
            "devicePixelRatio": self.device_pixel_ratio,
            "displayCapabilities": {
                "maxTextureSize": caps.max_texture_size,
                "maxViewportDims": list(caps.max_viewport_dims),
                "maxRenderBufferSize": caps.max_renderbuffer_size,
                "colorBufferFormats": list(caps.color_buffer_formats),
                "hasHDR": caps.has_hdr,
                "hasFloatTextures": caps.has_float_textures,
                "hasDepthTexture": caps.has_depth_texture,
                "antialiasingModes": list(caps.antialiasing_modes),
            },
            "recommendations": list(self.recommendations),
        }
