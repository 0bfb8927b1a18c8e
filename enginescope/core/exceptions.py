"""Exceptions raised by EngineScope.

Contains:
- EngineScopeError: Base class for all EngineScope errors
- ProfileConfigurationError: Invalid engine profile at registry build time
- ContextUnavailableError: No rendering context could be obtained
- SnapshotError: A document snapshot could not be assembled
"""


class EngineScopeError(Exception):
    """Base class for all EngineScope errors."""


class ProfileConfigurationError(EngineScopeError, ValueError):
    """
    Raised when an engine profile is malformed (no signatures, no
    recommendations, duplicate name or unknown signature type).

    This is a programmer/configuration error and is raised while the
    profile registry is being built, never during classification.
    """


class ContextUnavailableError(EngineScopeError):
    """
    Raised by the capability prober when asked to probe a missing
    rendering context.
    """


class SnapshotError(EngineScopeError):
    """
    Raised when a document snapshot cannot be assembled, e.g. a rendering
    context is supplied for a canvas that is not in the document.
    """
