"""Core module - models, snapshots, contexts, and infrastructure."""

from .config import Config, load_config
from .context import (
    Canvas2DContext,
    RenderingContext,
    StaticWebGL2Context,
    StaticWebGLContext,
    WebGL2Context,
    WebGLContext,
    load_context_descriptor,
)
from .exceptions import (
    ContextUnavailableError,
    EngineScopeError,
    ProfileConfigurationError,
    SnapshotError,
)
from .logging_config import setup_logging
from .models import (
    CanvasElement,
    CanvasPattern,
    CanvasSize,
    CapabilityRecord,
    ClassificationResult,
    DocumentSnapshot,
    DomPattern,
    HtmlSubstring,
    ScriptElement,
    ScriptPattern,
    Signature,
    SignatureKind,
    WebGLProbe,
)
from .snapshot import build_snapshot, load_snapshot

__all__ = [
    # Models
    "SignatureKind",
    "Signature",
    "DomPattern",
    "ScriptPattern",
    "CanvasPattern",
    "CanvasSize",
    "HtmlSubstring",
    "WebGLProbe",
    "ScriptElement",
    "CanvasElement",
    "DocumentSnapshot",
    "CapabilityRecord",
    "ClassificationResult",
    # Contexts
    "RenderingContext",
    "Canvas2DContext",
    "WebGLContext",
    "WebGL2Context",
    "StaticWebGLContext",
    "StaticWebGL2Context",
    "load_context_descriptor",
    # Snapshots
    "build_snapshot",
    "load_snapshot",
    # Errors
    "EngineScopeError",
    "ProfileConfigurationError",
    "ContextUnavailableError",
    "SnapshotError",
    # Config
    "Config",
    "load_config",
    "setup_logging",
]
