"""User interface module for EngineScope."""
