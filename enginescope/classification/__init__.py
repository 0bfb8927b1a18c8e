"""Classification core for identifying the engine behind a document."""

from .capabilities import CapabilityProber
from .display import DisplayAnalyzer
from .engine import EngineDetector, create_default_detector, score_profile
from .features import FEATURE_RULES, FeatureRule, detect_features
from .profiles import (
    DeepAnalyzer,
    EngineProfile,
    NullAnalyzer,
    ProfileRegistry,
    create_default_registry,
    load_profiles_from_file,
)
from .report import assemble_report
from .signatures import get_webgl_context, match_signature

__all__ = [
    # Signature Matcher
    "match_signature",
    "get_webgl_context",
    # Capability Prober
    "CapabilityProber",
    "DisplayAnalyzer",
    # Profile Registry
    "EngineProfile",
    "DeepAnalyzer",
    "NullAnalyzer",
    "ProfileRegistry",
    "create_default_registry",
    "load_profiles_from_file",
    # Classifier
    "EngineDetector",
    "create_default_detector",
    "score_profile",
    # Feature Detection
    "FeatureRule",
    "FEATURE_RULES",
    "detect_features",
    # Report
    "assemble_report",
]
