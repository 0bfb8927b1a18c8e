"""Feature Detection - Engine-specific feature flags.

This module implements the per-engine feature rules that are evaluated
for the winning profile and reported alongside its warnings.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from enginescope.classification.signatures import get_webgl_context
from enginescope.core.models import DocumentSnapshot

logger = logging.getLogger("enginescope.classification.features")


@dataclass(frozen=True)
class FeatureRule:
    """A feature detected by a document check.

    Attributes:
        feature: Feature string reported when the check passes
        check: Function that evaluates the snapshot
    """

    feature: str
    check: Callable[[DocumentSnapshot], bool]


def _selector(selector: str) -> Callable[[DocumentSnapshot], bool]:
    """Build a check that passes when a CSS selector matches."""

    def check(snapshot: DocumentSnapshot) -> bool:
        return snapshot.exists(selector)

    return check


def _first_canvas_has_webgl(snapshot: DocumentSnapshot) -> bool:
    canvas = snapshot.first_canvas()
    return canvas is not None and get_webgl_context(canvas) is not None


def _first_canvas_lacks_webgl(snapshot: DocumentSnapshot) -> bool:
    return not _first_canvas_has_webgl(snapshot)


FEATURE_RULES: dict[str, list[FeatureRule]] = {
    "Bitsy": [
        FeatureRule("Pixel-perfect scaling", _selector('canvas[style*="image-rendering"]')),
        FeatureRule("Touch input support", _selector("[ontouchstart]")),
    ],
    "Twine": [
        FeatureRule("Accessibility support", _selector("[role]")),
        FeatureRule("Save system", _selector("[data-save]")),
    ],
    "PICO-8": [
        FeatureRule("WebGL rendering", _first_canvas_has_webgl),
        FeatureRule("Canvas 2D fallback", _first_canvas_lacks_webgl),
        FeatureRule("Mobile controls", _selector("[ontouchstart]")),
    ],
    "PuzzleScript": [
        FeatureRule("Standard canvas setup", _selector("#gameCanvas")),
        FeatureRule("Undo support", _selector("[data-undo]")),
    ],
    "TIC-80": [
        FeatureRule("Native resolution", _selector('canvas[width="240"]')),
        FeatureRule("Gamepad support", _selector("[data-gamepad]")),
    ],
}


def detect_features(
    profile_name: str,
    snapshot: DocumentSnapshot,
    rules: dict[str, list[FeatureRule]] | None = None,
) -> list[str]:
    """Detect the features of an engine present in a snapshot.

    Args:
        profile_name: Name of the engine profile.
        snapshot: Document snapshot to inspect.
        rules: Feature rules to use (defaults to FEATURE_RULES).

    Returns:
        Detected feature strings, in rule order.
    """
    rules = FEATURE_RULES if rules is None else rules
    features: list[str] = []

    for rule in rules.get(profile_name, []):
        try:
            if rule.check(snapshot):
                features.append(rule.feature)
        except Exception as e:
            logger.warning(f"Error running feature check '{rule.feature}': {e}")

    return features
