"""Document snapshot construction.

Parses raw markup into the read-only DocumentSnapshot that the
classification core inspects. Rendering contexts captured elsewhere can be
attached to canvases by canvas id or by the canvas's position in the
document.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from bs4 import BeautifulSoup

from enginescope.core.context import RenderingContext
from enginescope.core.exceptions import SnapshotError
from enginescope.core.models import CanvasElement, DocumentSnapshot, ScriptElement

logger = logging.getLogger("enginescope.core.snapshot")

# HTML canvas defaults when width/height attributes are missing or invalid
DEFAULT_CANVAS_WIDTH = 300
DEFAULT_CANVAS_HEIGHT = 150


def parse_style(style: str) -> dict[str, str]:
    """Parse an inline style attribute into property -> value.

    Args:
        style: Raw style attribute text.

    Returns:
        Mapping of lower-cased property names to values.
    """
    declarations: dict[str, str] = {}
    for declaration in style.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip()
        if name and value:
            declarations[name] = value
    return declarations


def _parse_dimension(value: str | None, default: int) -> int:
    """Parse a canvas width/height attribute the way browsers do."""
    if value is None:
        return default
    digits = ""
    for char in str(value).strip():
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else default


def build_snapshot(
    html: str,
    contexts: Mapping[str, RenderingContext] | None = None,
) -> DocumentSnapshot:
    """Build a snapshot from raw markup.

    Args:
        html: Document markup.
        contexts: Rendering contexts to attach, keyed by canvas id or by
            the canvas index in document order (as a string, e.g. "0").

    Returns:
        The read-only DocumentSnapshot.

    Raises:
        SnapshotError: If a context key does not match any canvas.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    contexts = dict(contexts or {})
    used_keys: set[str] = set()

    scripts = []
    for tag in soup.find_all("script"):
        text = str(tag.string) if tag.string is not None else None
        src = tag.get("src")
        scripts.append(ScriptElement(text=text or None, src=src or None))

    canvases = []
    for index, tag in enumerate(soup.find_all("canvas")):
        element_id = tag.get("id", "") or ""
        classes = tag.get("class", [])
        if isinstance(classes, str):
            classes = classes.split()

        attached: dict[str, RenderingContext] = {}
        for key in (element_id, str(index)):
            if key and key in contexts:
                context = contexts[key]
                attached[context.kind] = context
                used_keys.add(key)

        attributes = {
            name: value if isinstance(value, str) else " ".join(value)
            for name, value in tag.attrs.items()
            if name not in ("id", "class", "style", "width", "height")
        }

        canvases.append(
            CanvasElement(
                width=_parse_dimension(tag.get("width"), DEFAULT_CANVAS_WIDTH),
                height=_parse_dimension(tag.get("height"), DEFAULT_CANVAS_HEIGHT),
                element_id=element_id,
                classes=tuple(classes),
                style=parse_style(tag.get("style", "") or ""),
                attributes=attributes,
                contexts=attached,
            )
        )

    unknown = sorted(set(contexts) - used_keys)
    if unknown:
        raise SnapshotError(f"No canvas found for context key(s): {', '.join(unknown)}")

    logger.debug(f"Built snapshot: {len(scripts)} scripts, {len(canvases)} canvases")

    return DocumentSnapshot(
        scripts=tuple(scripts),
        canvases=tuple(canvases),
        root=soup,
    )


def load_snapshot(
    file_path: Path,
    contexts: Mapping[str, RenderingContext] | None = None,
) -> DocumentSnapshot:
    """Build a snapshot from an HTML file.

    Args:
        file_path: Path to the HTML document.
        contexts: Rendering contexts to attach (see build_snapshot).

    Returns:
        The read-only DocumentSnapshot.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SnapshotError: If a context key does not match any canvas.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Document not found: {file_path}")

    return build_snapshot(file_path.read_text(encoding="utf-8", errors="replace"), contexts)
