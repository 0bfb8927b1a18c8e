"""Signature Matcher - Evaluates typed engine signatures.

This module evaluates a single engine signature against a document
snapshot. Matching is stateless and never raises for an incomplete
document: a snapshot without canvases, scripts, or an element tree simply
produces no matches.
"""

import logging

from enginescope.core.context import RenderingContext
from enginescope.core.models import (
    CanvasElement,
    CanvasPattern,
    CanvasSize,
    DocumentSnapshot,
    DomPattern,
    HtmlSubstring,
    ScriptPattern,
    Signature,
    WebGLProbe,
)

logger = logging.getLogger("enginescope.classification.signatures")

# Context kinds tried for WebGL, in preference order
WEBGL_CONTEXT_KINDS = ("webgl2", "webgl")


def get_webgl_context(canvas: CanvasElement) -> RenderingContext | None:
    """Obtain a WebGL context from a canvas, preferring WebGL 2.

    Args:
        canvas: Canvas to query.

    Returns:
        The first available WebGL context, or None.
    """
    for kind in WEBGL_CONTEXT_KINDS:
        try:
            context = canvas.get_context(kind)
        except Exception as e:
            logger.debug(f"Context lookup for '{kind}' failed: {e}")
            context = None
        if context is not None:
            return context
    return None


def match_signature(signature: Signature, snapshot: DocumentSnapshot) -> bool:
    """Check whether a signature matches a snapshot.

    Args:
        signature: Signature to evaluate.
        snapshot: Document snapshot to inspect.

    Returns:
        True if the signature matches, False otherwise.

    Raises:
        TypeError: If the signature is not a known signature variant.
    """
    if isinstance(signature, DomPattern):
        return _match_dom(signature, snapshot)
    elif isinstance(signature, ScriptPattern):
        return _match_script(signature, snapshot)
    elif isinstance(signature, CanvasPattern):
        return _match_canvas(signature, snapshot)
    elif isinstance(signature, CanvasSize):
        return _match_canvas_size(signature.width, signature.height, snapshot)
    elif isinstance(signature, HtmlSubstring):
        return _match_html(signature, snapshot)
    elif isinstance(signature, WebGLProbe):
        return _match_webgl(signature, snapshot)

    raise TypeError(f"Unknown signature type: {type(signature).__name__}")


def _match_dom(signature: DomPattern, snapshot: DocumentSnapshot) -> bool:
    """Match any element by class, id, or data- attribute."""
    return any(
        snapshot.has_class(pattern)
        or snapshot.has_id(pattern)
        or snapshot.has_data_attribute(pattern)
        for pattern in signature.patterns
    )


def _match_script(signature: ScriptPattern, snapshot: DocumentSnapshot) -> bool:
    """Match a case-sensitive substring of script text or src."""
    for pattern in signature.patterns:
        for script in snapshot.scripts:
            if script.text and pattern in script.text:
                return True
            if script.src and pattern in script.src:
                return True
    return False


def _match_canvas(signature: CanvasPattern, snapshot: DocumentSnapshot) -> bool:
    """Match a canvas by size, by id/class substring, or by presence."""
    if not snapshot.canvases:
        return False

    if signature.has_size:
        return _match_canvas_size(signature.width, signature.height, snapshot)

    if signature.patterns:
        return any(
            pattern in canvas.element_id or pattern in canvas.class_name
            for pattern in signature.patterns
            for canvas in snapshot.canvases
        )

    return True


def _match_canvas_size(width: int | None, height: int | None, snapshot: DocumentSnapshot) -> bool:
    """Match a canvas whose size equals width x height exactly."""
    return any(
        canvas.width == width and canvas.height == height for canvas in snapshot.canvases
    )


def _match_html(signature: HtmlSubstring, snapshot: DocumentSnapshot) -> bool:
    """Match a substring of the serialized markup."""
    if not signature.patterns:
        return False

    markup = snapshot.markup
    return any(pattern in markup for pattern in signature.patterns)


def _match_webgl(signature: WebGLProbe, snapshot: DocumentSnapshot) -> bool:
    """Match when some canvas yields a WebGL context.

    Shader names carried by the signature are not inspected; an obtainable
    context is sufficient.
    """
    if not snapshot.canvases:
        return False

    if not signature.require_context:
        return True

    return any(get_webgl_context(canvas) is not None for canvas in snapshot.canvases)
