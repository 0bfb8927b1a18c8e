"""Configuration management for EngineScope.

This module handles loading, saving, and validating configuration
from JSON files and environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Default paths
DEFAULT_CONFIG_DIR = Path(os.environ.get("ENGINESCOPE_HOME", "~/.enginescope"))
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_LOGS_DIR = "logs"


@dataclass
class DetectionConfig:
    """Configuration for engine detection."""

    profiles_file: str = ""  # Extra declarative profiles, registered after builtins
    min_confidence: float = 0.0  # Best scores at or below this report no engine
    include_capabilities: bool = True  # Attach the probed capability record


@dataclass
class DisplayConfig:
    """Configuration for display analysis."""

    device_pixel_ratio: float = 1.0


@dataclass
class OutputConfig:
    """Configuration for report output."""

    default_format: str = "text"  # text, json
    use_colors: bool = True


@dataclass
class Config:
    """Main configuration container for EngineScope.

    Attributes:
        config_dir: Base directory for all EngineScope data
        logs_dir: Directory for log files
        detection: Detection configuration
        display: Display analysis configuration
        output: Output configuration
    """

    config_dir: Path = field(default_factory=lambda: DEFAULT_CONFIG_DIR.expanduser())
    logs_dir: Path = field(default_factory=lambda: Path(DEFAULT_LOGS_DIR))

    detection: DetectionConfig = field(default_factory=DetectionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self) -> None:
        """Resolve relative paths to absolute paths."""
        if not self.logs_dir.is_absolute():
            self.logs_dir = self.config_dir / self.logs_dir

    @property
    def profiles_path(self) -> Path | None:
        """Resolved path of the extra profiles file, if configured."""
        if not self.detection.profiles_file:
            return None
        path = Path(self.detection.profiles_file).expanduser()
        if not path.is_absolute():
            path = self.config_dir / path
        return path

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for directory in [self.config_dir, self.logs_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for JSON serialization."""
        return {
            "config_dir": str(self.config_dir),
            "logs_dir": str(self.logs_dir),
            "detection": {
                "profiles_file": self.detection.profiles_file,
                "min_confidence": self.detection.min_confidence,
                "include_capabilities": self.detection.include_capabilities,
            },
            "display": {
                "device_pixel_ratio": self.display.device_pixel_ratio,
            },
            "output": {
                "default_format": self.output.default_format,
                "use_colors": self.output.use_colors,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        config = cls()

        if "config_dir" in data:
            config.config_dir = Path(data["config_dir"])
        if "logs_dir" in data:
            config.logs_dir = Path(data["logs_dir"])
        else:
            config.logs_dir = Path(DEFAULT_LOGS_DIR)

        # Load detection config
        if "detection" in data:
            detection_data = data["detection"]
            config.detection = DetectionConfig(
                profiles_file=detection_data.get("profiles_file", ""),
                min_confidence=float(detection_data.get("min_confidence", 0.0)),
                include_capabilities=detection_data.get("include_capabilities", True),
            )

        # Load display config
        if "display" in data:
            display_data = data["display"]
            config.display = DisplayConfig(
                device_pixel_ratio=float(display_data.get("device_pixel_ratio", 1.0)),
            )

        # Load output config
        if "output" in data:
            output_data = data["output"]
            config.output = OutputConfig(
                default_format=output_data.get("default_format", "text"),
                use_colors=output_data.get("use_colors", True),
            )

        # Re-run post_init to resolve paths
        config.__post_init__()

        return config


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Config object with loaded settings.

    Raises:
        json.JSONDecodeError: If config file contains invalid JSON.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_DIR.expanduser() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        # Return default config if no config file exists
        return Config()

    with open(config_path, encoding="utf-8") as f:
        data = json.load(f)

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Config object to save.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = config.config_dir / DEFAULT_CONFIG_FILE

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)


def get_default_config() -> Config:
    """Get the default configuration.

    Returns:
        A new Config object with default settings.
    """
    return Config()
