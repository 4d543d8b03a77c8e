"""Filesystem helpers for configuration files.

Provides:
    - YAML load with validation of the top-level shape
    - Path resolution relative to a configuration directory

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from motion_control.utils import fs
    data = fs.load_yaml("configs/defaults.yaml")
    table = fs.resolve_path("comp/x.comp", base=config_dir)
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content; empty dict for an empty document

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails or the document is not a mapping

    Notes
    -----
    Uses safe_load to prevent arbitrary code execution.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(
            f"YAML file {path} must contain a mapping, got {type(data).__name__}"
        )
    return data


def resolve_path(
    path: Union[str, Path],
    base: Optional[Union[str, Path]] = None
) -> Path:
    """Resolve *path* against *base* when it is relative.

    Parameters
    ----------
    path : Union[str, Path]
        Path as written in a configuration file
    base : Union[str, Path], optional
        Directory relative paths are anchored to; None keeps the
        process working directory

    Returns
    -------
    Path
        Absolute or base-anchored path (``~`` expanded)
    """
    p = Path(path).expanduser()
    if base is None or p.is_absolute():
        return p
    return Path(base) / p
