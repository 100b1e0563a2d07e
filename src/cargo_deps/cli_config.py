"""
Configuration management for cargo-deps.

Settings come from dataclass defaults, optionally overridden by a JSON or
YAML config file found in the project directory or the user's home.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console

from .reporting import SUPPORTED_FORMATS

console = Console(stderr=True)


@dataclass
class ScanConfig:
    """Core scanning configuration."""

    output_format: str = "json"
    exclude_dirs: List[str] = field(default_factory=list)
    follow_symlinks: bool = False
    verbose: bool = False


@dataclass
class SecurityConfig:
    """Limits applied when reading manifests."""

    max_file_size_mb: int = 10

    @property
    def max_file_size_bytes(self) -> int:
        """Convert MB to bytes for internal use."""
        return self.max_file_size_mb * 1024 * 1024


@dataclass
class LoggingConfig:
    """Logging and error handling configuration."""

    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ComprehensiveConfig:
    """Main configuration containing all subsections."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Global configuration instance
_global_config: Optional[ComprehensiveConfig] = None


def _valid_log_format(log_format: Any) -> bool:
    if not isinstance(log_format, str):
        return False
    try:
        logging.Formatter(log_format)
    except (ValueError, TypeError):
        return False
    return True


def validate_config_values(config: ComprehensiveConfig) -> List[str]:
    """
    Validate configuration values and return any errors.

    Args:
        config: Configuration to validate

    Returns:
        List[str]: List of validation errors (empty if valid)
    """
    errors = []

    if config.scan.output_format not in SUPPORTED_FORMATS:
        errors.append(
            f"scan.output_format must be one of {', '.join(SUPPORTED_FORMATS)}"
        )
    if not isinstance(config.scan.exclude_dirs, list):
        errors.append("scan.exclude_dirs must be a list of directory names")

    if not isinstance(config.security.max_file_size_mb, int) or (
        config.security.max_file_size_mb <= 0
    ):
        errors.append("security.max_file_size_mb must be a positive integer")

    if not isinstance(logging.getLevelName(str(config.logging.log_level).upper()), int):
        errors.append(f"logging.log_level is not a known level: {config.logging.log_level}")
    if not _valid_log_format(config.logging.log_format):
        errors.append("logging.log_format is not a valid logging format string")

    return errors


def load_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    """Load config from file."""
    if not config_path.exists():
        return None

    try:
        with open(config_path, encoding="utf-8") as f:
            if config_path.suffix.lower() in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif config_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                return None
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(
            f"⚠️  Error loading config from {config_path}: {e}", style="yellow"
        )
        return None

    if not isinstance(data, dict):
        console.print(
            f"⚠️  Config file {config_path} must contain a mapping", style="yellow"
        )
        return None
    return data


def find_config_file() -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        Path.cwd() / ".cargo-deps.json",
        Path.cwd() / ".cargo-deps.yaml",
        Path.cwd() / ".cargo-deps.yml",
        Path.home() / ".config" / "cargo-deps" / "config.json",
        Path.home() / ".config" / "cargo-deps" / "config.yaml",
    ]

    for location in locations:
        if location.exists():
            return location

    return None


def apply_config_section(
    config: Any, section_data: Dict[str, Any], section_name: str
) -> None:
    """Apply configuration from dictionary to config section."""
    if not isinstance(section_data, dict):
        console.print(
            f"⚠️  Config section {section_name} must be a mapping", style="yellow"
        )
        return

    for key, value in section_data.items():
        if hasattr(config, key) and not isinstance(
            getattr(type(config), key, None), property
        ):
            setattr(config, key, value)
        else:
            console.print(
                f"⚠️  Unknown config key in {section_name}: {key}", style="yellow"
            )


def build_config(file_config: Optional[Dict[str, Any]]) -> ComprehensiveConfig:
    """Build a configuration from defaults plus an optional file mapping."""
    config = ComprehensiveConfig()
    if not file_config:
        return config

    for section_name in ("scan", "security", "logging"):
        if section_name in file_config:
            apply_config_section(
                getattr(config, section_name), file_config[section_name], section_name
            )

    return config


def load_config(config_path: Optional[Path] = None) -> ComprehensiveConfig:
    """Load configuration from an explicit path or the standard locations."""
    global _global_config

    if config_path is None and _global_config is not None:
        return _global_config

    config_file = config_path or find_config_file()
    file_config = load_config_file(config_file) if config_file else None
    config = build_config(file_config)

    validation_errors = validate_config_values(config)
    if validation_errors:
        console.print("⚠️  Configuration validation errors:", style="red")
        for error in validation_errors:
            console.print(f"  • {error}", style="red")
        console.print("Using default values for invalid settings.", style="yellow")
        config = _fallback_invalid(config)

    _global_config = config
    return config


def _fallback_invalid(config: ComprehensiveConfig) -> ComprehensiveConfig:
    defaults = ComprehensiveConfig()
    if config.scan.output_format not in SUPPORTED_FORMATS:
        config.scan.output_format = defaults.scan.output_format
    if not isinstance(config.scan.exclude_dirs, list):
        config.scan.exclude_dirs = defaults.scan.exclude_dirs
    if not isinstance(config.security.max_file_size_mb, int) or (
        config.security.max_file_size_mb <= 0
    ):
        config.security.max_file_size_mb = defaults.security.max_file_size_mb
    if not isinstance(logging.getLevelName(str(config.logging.log_level).upper()), int):
        config.logging.log_level = defaults.logging.log_level
    if not _valid_log_format(config.logging.log_format):
        config.logging.log_format = defaults.logging.log_format
    return config


def get_config() -> ComprehensiveConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _global_config
    _global_config = None


def create_sample_config() -> str:
    """Generate sample configuration."""
    return json.dumps(ComprehensiveConfig().to_dict(), indent=2)
