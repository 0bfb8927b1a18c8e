"""Rendering context handles.

EngineScope never creates a GPU context itself. Contexts are supplied by
whoever built the document snapshot (a headless browser, a capture tool,
a test) and are only queried. This module defines the handle interface the
core queries, plus static implementations backed by a captured capability
descriptor so that a context can be replayed outside of a browser.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

logger = logging.getLogger("enginescope.core.context")


class RenderingContext(ABC):
    """Base interface for a canvas rendering context."""

    @property
    @abstractmethod
    def kind(self) -> str:
        """Return the context type name ("2d", "webgl" or "webgl2")."""
        pass


class Canvas2DContext(RenderingContext):
    """A plain 2D canvas context. Carries no capabilities."""

    @property
    def kind(self) -> str:
        return "2d"


class WebGLContext(RenderingContext):
    """Interface of a WebGL 1 rendering context.

    The GL enum values mirror the WebGL specification so that callers can
    write ``gl.get_parameter(gl.MAX_TEXTURE_SIZE)`` as they would in a
    browser.
    """

    NO_ERROR = 0
    INVALID_ENUM = 0x0500
    INVALID_VALUE = 0x0501
    INVALID_OPERATION = 0x0502

    TEXTURE_2D = 0x0DE1
    UNSIGNED_BYTE = 0x1401
    RGB = 0x1907
    RGBA = 0x1908

    MAX_TEXTURE_SIZE = 0x0D33
    MAX_VIEWPORT_DIMS = 0x0D3A
    MAX_RENDERBUFFER_SIZE = 0x84E8

    @property
    def kind(self) -> str:
        return "webgl"

    @abstractmethod
    def get_extension(self, name: str) -> Any | None:
        """Return the extension object, or None if unsupported."""
        pass

    @abstractmethod
    def get_supported_extensions(self) -> list[str]:
        """Return the names of all supported extensions."""
        pass

    @abstractmethod
    def get_parameter(self, pname: int) -> Any:
        """Return the value of a context parameter."""
        pass

    @abstractmethod
    def create_texture(self) -> int:
        """Allocate a texture object and return its handle."""
        pass

    @abstractmethod
    def bind_texture(self, target: int, texture: int | None) -> None:
        """Bind a texture to a target."""
        pass

    @abstractmethod
    def tex_image_2d(
        self,
        target: int,
        level: int,
        internal_format: int,
        width: int,
        height: int,
        border: int,
        data_format: int,
        data_type: int,
        pixels: bytes | None,
    ) -> None:
        """Upload image data to the bound texture."""
        pass

    @abstractmethod
    def get_error(self) -> int:
        """Return and clear the current error flag."""
        pass

    @abstractmethod
    def delete_texture(self, texture: int | None) -> None:
        """Release a texture object."""
        pass


class WebGL2Context(WebGLContext):
    """Interface of a WebGL 2 rendering context."""

    R8 = 0x8229
    RG8 = 0x822B
    RGBA16F = 0x881A
    MAX_SAMPLES = 0x8D57

    @property
    def kind(self) -> str:
        return "webgl2"


class StaticWebGLContext(WebGLContext):
    """WebGL 1 context replayed from a captured capability descriptor.

    Texture uploads succeed unless the internal format is listed in
    ``unsupported_formats``, in which case ``INVALID_ENUM`` is raised on
    the error flag, like a real driver would.

    Example:
        gl = StaticWebGLContext(
            extensions=["OES_texture_float"],
            parameters={"MAX_TEXTURE_SIZE": 4096},
        )
        gl.get_parameter(gl.MAX_TEXTURE_SIZE)  # 4096
    """

    def __init__(
        self,
        extensions: list[str] | None = None,
        parameters: dict[str, Any] | None = None,
        unsupported_formats: list[int] | None = None,
    ) -> None:
        self._extensions = list(extensions or [])
        self._parameters: dict[int, Any] = {}
        for name, value in (parameters or {}).items():
            pname = getattr(self, name, None)
            if not isinstance(pname, int):
                logger.warning(f"Ignoring unknown context parameter: {name}")
                continue
            if isinstance(value, list):
                value = tuple(value)
            self._parameters[pname] = value
        self._unsupported_formats = set(unsupported_formats or [])
        self._error = self.NO_ERROR
        self._next_texture = 1
        self._live_textures: set[int] = set()
        self._bound_texture: int | None = None

    def get_extension(self, name: str) -> Any | None:
        if name in self._extensions:
            return {"name": name}
        return None

    def get_supported_extensions(self) -> list[str]:
        return list(self._extensions)

    def get_parameter(self, pname: int) -> Any:
        return self._parameters.get(pname)

    def create_texture(self) -> int:
        texture = self._next_texture
        self._next_texture += 1
        self._live_textures.add(texture)
        return texture

    def bind_texture(self, target: int, texture: int | None) -> None:
        if texture is not None and texture not in self._live_textures:
            self._set_error(self.INVALID_OPERATION)
            return
        self._bound_texture = texture

    def tex_image_2d(
        self,
        target: int,
        level: int,
        internal_format: int,
        width: int,
        height: int,
        border: int,
        data_format: int,
        data_type: int,
        pixels: bytes | None,
    ) -> None:
        if self._bound_texture is None:
            self._set_error(self.INVALID_OPERATION)
        elif internal_format in self._unsupported_formats:
            self._set_error(self.INVALID_ENUM)

    def get_error(self) -> int:
        error, self._error = self._error, self.NO_ERROR
        return error

    def delete_texture(self, texture: int | None) -> None:
        if texture is None:
            return
        self._live_textures.discard(texture)
        if self._bound_texture == texture:
            self._bound_texture = None

    def _set_error(self, error: int) -> None:
        # GL keeps the first error until it is read
        if self._error == self.NO_ERROR:
            self._error = error

    @property
    def live_textures(self) -> int:
        """Number of texture objects currently allocated."""
        return len(self._live_textures)


class StaticWebGL2Context(StaticWebGLContext, WebGL2Context):
    """WebGL 2 context replayed from a captured capability descriptor."""


def context_from_descriptor(data: dict[str, Any]) -> RenderingContext:
    """Build a static context from a descriptor dictionary.

    A descriptor with ``"kind": "2d"`` yields a plain 2D context; any other
    descriptor describes a WebGL context::

        {
            "version": 2,
            "extensions": ["EXT_color_buffer_float"],
            "parameters": {"MAX_TEXTURE_SIZE": 16384, "MAX_VIEWPORT_DIMS": [16384, 16384]},
            "unsupported_formats": ["RGBA16F"]
        }

    Args:
        data: Descriptor dictionary.

    Returns:
        Canvas2DContext for kind "2d", StaticWebGL2Context for version 2,
        StaticWebGLContext otherwise.

    Raises:
        ValueError: If the kind is unknown or the version is not 1 or 2.
    """
    kind = data.get("kind", "webgl")
    if kind == "2d":
        return Canvas2DContext()
    if kind not in ("webgl", "webgl2"):
        raise ValueError(f"Unsupported context kind in descriptor: {kind}")

    version = data.get("version", 2 if kind == "webgl2" else 1)
    if version not in (1, 2):
        raise ValueError(f"Unsupported WebGL version in descriptor: {version}")

    context_class = StaticWebGL2Context if version == 2 else StaticWebGLContext

    unsupported: list[int] = []
    for fmt in data.get("unsupported_formats", []):
        if isinstance(fmt, int):
            unsupported.append(fmt)
        elif isinstance(getattr(context_class, str(fmt), None), int):
            unsupported.append(getattr(context_class, fmt))
        else:
            logger.warning(f"Ignoring unknown texture format: {fmt}")

    return context_class(
        extensions=data.get("extensions", []),
        parameters=data.get("parameters", {}),
        unsupported_formats=unsupported,
    )


def load_context_descriptor(file_path: Path) -> RenderingContext:
    """Load a static context from a JSON descriptor file.

    Args:
        file_path: Path to the descriptor.

    Returns:
        The replayed context.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON is invalid or the descriptor malformed.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Context descriptor not found: {file_path}")

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in context descriptor: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Context descriptor must be a JSON object")

    return context_from_descriptor(data)
