"""Display Analyzer - Resolution and display capability checks.

Analyzes a canvas resolution against the display-related limits of its
WebGL context (texture and viewport limits, colour buffer formats, HDR,
depth textures, antialiasing) and produces display recommendations.
"""

import logging

from enginescope.classification.capabilities import DEPTH_TEXTURE_EXTENSIONS, CapabilityProber
from enginescope.core.context import RenderingContext, WebGL2Context, WebGLContext
from enginescope.core.exceptions import ContextUnavailableError
from enginescope.core.models import DisplayAnalysis, DisplayCapabilities, Resolution

logger = logging.getLogger("enginescope.classification.display")

# Aspect ratios outside this range are reported as unusual
MIN_ASPECT_RATIO = 1.0
MAX_ASPECT_RATIO = 2.5


class DisplayAnalyzer:
    """Analyzer for canvas display characteristics.

    Example:
        analyzer = DisplayAnalyzer()
        analysis = analyzer.analyze(gl, width=1920, height=1080, device_pixel_ratio=2)
        for rec in analysis.recommendations:
            print(rec)
    """

    def __init__(self, prober: CapabilityProber | None = None) -> None:
        self.prober = prober or CapabilityProber()

    def analyze(
        self,
        context: RenderingContext | None,
        width: int,
        height: int,
        device_pixel_ratio: float = 1.0,
    ) -> DisplayAnalysis:
        """Analyze a canvas and its WebGL context.

        Args:
            context: WebGL context of the canvas.
            width: Canvas width in pixels.
            height: Canvas height in pixels.
            device_pixel_ratio: Device pixel ratio of the display.

        Returns:
            DisplayAnalysis with recommendations.

        Raises:
            ContextUnavailableError: If no WebGL context was given.
        """
        if not isinstance(context, WebGLContext):
            raise ContextUnavailableError("Display analysis requires a WebGL context")

        analysis = DisplayAnalysis(
            resolution=Resolution(
                width=width,
                height=height,
                aspect_ratio=width / height if height else 0.0,
            ),
            device_pixel_ratio=device_pixel_ratio or 1.0,
            capabilities=self.analyze_capabilities(context),
        )
        analysis.recommendations = self._generate_recommendations(analysis)
        return analysis

    def analyze_capabilities(self, gl: WebGLContext) -> DisplayCapabilities:
        """Collect display capabilities of a WebGL context."""
        record = self.prober.probe(gl)
        return DisplayCapabilities(
            max_texture_size=record.max_texture_size,
            max_viewport_dims=record.max_viewport_dims,
            max_renderbuffer_size=int(gl.get_parameter(gl.MAX_RENDERBUFFER_SIZE) or 0),
            color_buffer_formats=self.get_supported_color_formats(gl),
            has_hdr=isinstance(gl, WebGL2Context)
            and self.prober.has_extension(gl, "EXT_color_buffer_float"),
            has_float_textures=record.float_textures,
            has_depth_texture=self.prober.has_any_extension(gl, DEPTH_TEXTURE_EXTENSIONS),
            antialiasing_modes=self.get_antialiasing_modes(gl),
        )

    def get_supported_color_formats(self, gl: WebGLContext) -> list[str]:
        """List the colour buffer formats the context accepts."""
        formats: list[str] = []

        if self.prober.is_format_supported(gl, gl.RGBA):
            formats.append("RGBA8")
        if self.prober.is_format_supported(gl, gl.RGB):
            formats.append("RGB8")
        if self.prober.has_extension(gl, "EXT_sRGB"):
            formats.append("sRGB")

        if isinstance(gl, WebGL2Context):
            if self.prober.is_format_supported(gl, gl.R8):
                formats.append("R8")
            if self.prober.is_format_supported(gl, gl.RG8):
                formats.append("RG8")
            if self.prober.is_format_supported(gl, gl.RGBA16F):
                formats.append("RGBA16F")

        return formats

    def get_antialiasing_modes(self, gl: WebGLContext) -> list[str]:
        """List available antialiasing modes."""
        modes: list[str] = []

        max_samples = 0
        if isinstance(gl, WebGL2Context):
            max_samples = int(gl.get_parameter(gl.MAX_SAMPLES) or 0)
        if max_samples > 0:
            modes.append(f"MSAA (up to {max_samples}x)")

        # Post-process technique, always possible
        modes.append("FXAA")
        return modes

    def _generate_recommendations(self, analysis: DisplayAnalysis) -> list[str]:
        recommendations: list[str] = []
        resolution = analysis.resolution
        dpr = analysis.device_pixel_ratio
        caps = analysis.capabilities

        # A limit of 0 means the context did not report it
        if caps.max_texture_size > 0 and (
            resolution.width * dpr > caps.max_texture_size
            or resolution.height * dpr > caps.max_texture_size
        ):
            recommendations.append(
                "Canvas size exceeds maximum texture size. Consider reducing resolution "
                "or implementing split-screen rendering."
            )

        if dpr > 1:
            recommendations.append(
                f"High DPI display detected ({dpr:g}x). Consider implementing resolution "
                "scaling for performance."
            )

        if caps.has_hdr:
            recommendations.append(
                "HDR capable display detected. Consider implementing HDR rendering pipeline."
            )

        if any("MSAA" in mode for mode in caps.antialiasing_modes):
            recommendations.append(
                "MSAA supported. Consider using MSAA for static scenes and FXAA for "
                "dynamic content."
            )

        if caps.has_float_textures:
            recommendations.append(
                "Float textures supported. Consider using for HDR effects and advanced "
                "post-processing."
            )

        if caps.has_depth_texture:
            recommendations.append(
                "Depth textures supported. Consider using for shadow mapping and "
                "depth-based effects."
            )

        max_width, max_height = caps.max_viewport_dims
        if max_width > 0 and max_height > 0 and (
            resolution.width > max_width or resolution.height > max_height
        ):
            recommendations.append(
                "Viewport dimensions exceed maximum. Implement viewport splitting or "
                "reduce resolution."
            )

        if resolution.aspect_ratio < MIN_ASPECT_RATIO or resolution.aspect_ratio > MAX_ASPECT_RATIO:
            recommendations.append(
                "Unusual aspect ratio detected. Ensure content scales appropriately across "
                "different screen sizes."
            )

        logger.debug(f"Generated {len(recommendations)} display recommendations")
        return recommendations
