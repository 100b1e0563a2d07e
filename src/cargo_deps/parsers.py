from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

from .cli_config import ComprehensiveConfig, get_config

MANIFEST_NAME = "Cargo.toml"


def _validate_file_path(
    file_path: Union[str, Path], config: Optional[ComprehensiveConfig] = None
) -> Path:
    """
    Validate a manifest path before reading it.

    Args:
        file_path: The file path to validate
        config: Configuration supplying the size limit (global config if None)

    Returns:
        Path: Validated path object

    Raises:
        ValueError: If path is missing, not a file, not a manifest or too large
    """
    if not file_path:
        raise ValueError("File path must be a non-empty string")

    path = Path(file_path)

    if not path.exists():
        raise ValueError(f"File does not exist: {path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    if path.name != MANIFEST_NAME:
        raise ValueError(f"File must be named {MANIFEST_NAME}: {path.name}")

    config = config or get_config()
    try:
        file_size = path.stat().st_size
    except OSError as e:
        raise ValueError(f"Cannot access file: {e}")

    max_file_size = config.security.max_file_size_bytes
    if file_size > max_file_size:
        raise ValueError(f"File too large: {file_size} bytes (max: {max_file_size})")

    return path


def _safe_read_file(path: Path) -> str:
    """
    Read a manifest as UTF-8 text.

    Raises:
        ValueError: If file cannot be read
    """
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError:
        raise ValueError("File contains invalid UTF-8 characters")
    except PermissionError:
        raise ValueError("Permission denied reading file")
    except OSError as e:
        raise ValueError(f"Error reading file: {e}")


def parse_manifest_text(content: str, source: str = MANIFEST_NAME) -> Dict[str, Any]:
    """
    Parse manifest text into a nested mapping.

    Args:
        content: TOML text of a Cargo manifest
        source: Where the text came from, used in error reports

    Returns:
        Dict[str, Any]: The parsed manifest tree

    Raises:
        ValueError: If the text is not valid TOML
    """
    try:
        return toml.loads(content)
    except toml.TomlDecodeError as e:
        raise ValueError(f"Invalid TOML format in {source}: {e}")
    except Exception as e:
        raise ValueError(f"Error processing {source}: {e}")


def load_manifest(
    file_path: Union[str, Path],
    config: Optional[ComprehensiveConfig] = None,
) -> Dict[str, Any]:
    """
    Read and parse one Cargo.toml file.

    The file is held open only while its text is read.

    Args:
        file_path: Path to the Cargo.toml file
        config: Configuration supplying read limits

    Returns:
        Dict[str, Any]: The parsed manifest tree

    Raises:
        ValueError: If file cannot be read or contains invalid TOML
    """
    path = _validate_file_path(file_path, config)
    content = _safe_read_file(path)
    return parse_manifest_text(content, str(file_path))
