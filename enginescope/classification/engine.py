"""Classification Engine - Engine detection core.

This module provides the confidence scorer and the classifier that picks
the best engine profile for a document snapshot, runs the winner's deep
analysis, and assembles the classification result.
"""

import logging
from fractions import Fraction
from pathlib import Path

from enginescope.classification.capabilities import CapabilityProber
from enginescope.classification.features import detect_features
from enginescope.classification.profiles import (
    EngineProfile,
    ProfileRegistry,
    create_default_registry,
)
from enginescope.classification.signatures import get_webgl_context, match_signature
from enginescope.core.exceptions import ContextUnavailableError
from enginescope.core.models import CapabilityRecord, ClassificationResult, DocumentSnapshot

logger = logging.getLogger("enginescope.classification.engine")


def score_profile(profile: EngineProfile, snapshot: DocumentSnapshot) -> Fraction:
    """Score a profile against a snapshot.

    Every signature carries equal weight, so the score is the fraction of
    the profile's signatures that match.

    Args:
        profile: Profile to score.
        snapshot: Document snapshot to inspect.

    Returns:
        Score in [0, 1].
    """
    matches = 0
    for signature in profile.signatures:
        if match_signature(signature, snapshot):
            matches += 1
    return Fraction(matches, len(profile.signatures))


class EngineDetector:
    """Classifier selecting the best engine profile for a snapshot.

    Profiles are scored strictly sequentially in registration order. A
    later profile only replaces the current best when it scores strictly
    higher, so ties go to the earlier-registered profile. The detector
    keeps no per-call state and may be shared across concurrent calls.

    Example:
        detector = EngineDetector()
        result = detector.detect(build_snapshot(html))
        if result:
            print(f"{result.name}: {float(result.confidence):.0%}")
    """

    def __init__(
        self,
        registry: ProfileRegistry | None = None,
        prober: CapabilityProber | None = None,
        min_confidence: float = 0.0,
        include_capabilities: bool = False,
    ) -> None:
        """Initialize the detector.

        Args:
            registry: Profile registry (defaults to the builtin profiles).
            prober: Capability prober passed to deep analysis.
            min_confidence: Best scores at or below this are reported as
                no match.
            include_capabilities: Whether to attach the capability record
                of the first WebGL canvas to the result.
        """
        self.registry = registry if registry is not None else create_default_registry()
        self.prober = prober or CapabilityProber()
        self.min_confidence = min_confidence
        self.include_capabilities = include_capabilities

    def detect(self, snapshot: DocumentSnapshot) -> ClassificationResult | None:
        """Detect the engine that produced a document.

        Args:
            snapshot: Document snapshot to inspect.

        Returns:
            ClassificationResult for the best profile, or None if no
            profile scored above zero (or above min_confidence).
        """
        best: ClassificationResult | None = None
        best_score = Fraction(0)

        for profile in self.registry:
            score = score_profile(profile, snapshot)
            logger.debug(f"Profile {profile.name} scored {score}")

            if score > best_score:
                best = ClassificationResult(
                    name=profile.name,
                    confidence=score,
                    features=detect_features(profile.name, snapshot),
                    recommendations=list(profile.recommendations),
                    warnings=self._deep_analyze(profile, snapshot),
                )
                best_score = score

        if best is None:
            logger.info("No engine detected")
            return None

        if best_score <= self.min_confidence:
            logger.info(
                f"Best match {best.name} ({float(best_score):.2f}) is below "
                f"minimum confidence {self.min_confidence}"
            )
            return None

        if self.include_capabilities:
            best.capabilities = self._probe_first_webgl_canvas(snapshot)

        logger.info(f"Detected {best.name} with confidence {float(best_score):.2f}")
        return best

    classify = detect

    def score_all(self, snapshot: DocumentSnapshot) -> list[tuple[str, Fraction]]:
        """Score every profile against a snapshot.

        Args:
            snapshot: Document snapshot to inspect.

        Returns:
            (profile name, score) pairs in registration order.
        """
        return [(profile.name, score_profile(profile, snapshot)) for profile in self.registry]

    def _deep_analyze(self, profile: EngineProfile, snapshot: DocumentSnapshot) -> list[str]:
        """Run a profile's deep analysis, degrading to no warnings on failure."""
        try:
            return list(profile.deep_analyze(snapshot, self.prober))
        except Exception as e:
            logger.warning(f"Deep analysis failed for {profile.name}: {e}")
            return []

    def _probe_first_webgl_canvas(self, snapshot: DocumentSnapshot) -> CapabilityRecord | None:
        for canvas in snapshot.canvases:
            context = get_webgl_context(canvas)
            if context is None:
                continue
            try:
                return self.prober.probe(context)
            except ContextUnavailableError as e:
                logger.debug(f"Capability probe failed: {e}")
            except Exception as e:
                logger.warning(f"Capability probe failed for canvas '{canvas.element_id}': {e}")
                return None
        return None


def create_default_detector(profiles_path: Path | None = None) -> EngineDetector:
    """Create an engine detector with default settings.

    Args:
        profiles_path: Optional declarative profile file to register after
            the builtin profiles.

    Returns:
        Configured EngineDetector.
    """
    registry = create_default_registry(profiles_path)
    return EngineDetector(registry=registry)
