"""EngineScope - Web game engine detection and diagnostics."""

__version__ = "0.1.0"
