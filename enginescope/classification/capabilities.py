"""Capability Prober - WebGL feature and limit detection.

Enumerates what a live WebGL context supports into a flat
CapabilityRecord. Probing is a pure function of the context: nothing is
cached and the context is left unchanged, apart from scratch textures used
to test format support, which are always released.
"""

import logging

from enginescope.core.context import RenderingContext, WebGL2Context, WebGLContext
from enginescope.core.exceptions import ContextUnavailableError
from enginescope.core.models import CapabilityRecord

logger = logging.getLogger("enginescope.classification.capabilities")

ANISOTROPIC_EXTENSIONS = (
    "EXT_texture_filter_anisotropic",
    "WEBKIT_EXT_texture_filter_anisotropic",
)
DEPTH_TEXTURE_EXTENSIONS = (
    "WEBGL_depth_texture",
    "WEBKIT_WEBGL_depth_texture",
    "MOZ_WEBGL_depth_texture",
)


class CapabilityProber:
    """Probes WebGL contexts for supported features.

    Example:
        prober = CapabilityProber()
        record = prober.probe(gl)
        if not record.webgl2:
            print("WebGL 1 only")
    """

    def probe(self, context: RenderingContext | None) -> CapabilityRecord:
        """Enumerate the capabilities of a WebGL context.

        Args:
            context: The WebGL context to probe.

        Returns:
            CapabilityRecord for the context.

        Raises:
            ContextUnavailableError: If no WebGL context was given.
        """
        gl = self._require_webgl(context)
        is_webgl2 = isinstance(gl, WebGL2Context)

        record = CapabilityRecord(
            webgl2=is_webgl2,
            float_textures=self.has_extension(gl, "OES_texture_float"),
            anisotropic_filtering=self.has_any_extension(gl, ANISOTROPIC_EXTENSIONS),
            instanced_arrays=is_webgl2 or self.has_extension(gl, "ANGLE_instanced_arrays"),
            multi_draw_indirect=is_webgl2
            and self.has_extension(gl, "WEBGL_multi_draw_indirect"),
            max_texture_size=self._int_parameter(gl, gl.MAX_TEXTURE_SIZE),
            max_viewport_dims=self._dims_parameter(gl, gl.MAX_VIEWPORT_DIMS),
        )

        logger.debug(f"Probed {gl.kind} context: {record}")
        return record

    def has_extension(self, gl: WebGLContext, name: str) -> bool:
        """Check whether a named extension is available."""
        return gl.get_extension(name) is not None

    def has_any_extension(self, gl: WebGLContext, names: tuple[str, ...]) -> bool:
        """Check whether any of several vendor-prefixed extensions is available."""
        return any(self.has_extension(gl, name) for name in names)

    def is_format_supported(self, context: RenderingContext | None, internal_format: int) -> bool:
        """Test whether a texture internal format can be allocated.

        Creates a 1x1 scratch texture, uploads with the given format, and
        inspects the error flag. The scratch texture is deleted on every
        exit path.

        Args:
            context: The WebGL context to test.
            internal_format: GL internal format enum.

        Returns:
            True if the upload raised no GL error.

        Raises:
            ContextUnavailableError: If no WebGL context was given.
        """
        gl = self._require_webgl(context)

        # Discard any stale error so it isn't attributed to this upload
        gl.get_error()

        texture = gl.create_texture()
        try:
            gl.bind_texture(gl.TEXTURE_2D, texture)
            gl.tex_image_2d(
                gl.TEXTURE_2D, 0, internal_format, 1, 1, 0, gl.RGBA, gl.UNSIGNED_BYTE, None
            )
            return gl.get_error() == gl.NO_ERROR
        finally:
            gl.bind_texture(gl.TEXTURE_2D, None)
            gl.delete_texture(texture)

    def _require_webgl(self, context: RenderingContext | None) -> WebGLContext:
        if context is None:
            raise ContextUnavailableError("No rendering context available to probe")
        if not isinstance(context, WebGLContext):
            raise ContextUnavailableError(f"Context of kind '{context.kind}' is not a WebGL context")
        return context

    def _int_parameter(self, gl: WebGLContext, pname: int) -> int:
        value = gl.get_parameter(pname)
        try:
            return int(value) if value is not None else 0
        except (TypeError, ValueError):
            logger.warning(f"Unexpected value for parameter 0x{pname:04X}: {value!r}")
            return 0

    def _dims_parameter(self, gl: WebGLContext, pname: int) -> tuple[int, int]:
        value = gl.get_parameter(pname)
        try:
            width, height = value
            return (int(width), int(height))
        except (TypeError, ValueError):
            if value is not None:
                logger.warning(f"Unexpected value for parameter 0x{pname:04X}: {value!r}")
            return (0, 0)
