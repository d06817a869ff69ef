"""Path utilities for finding the workspace root and its config file."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


CONFIG_FILENAME = ".cratepub.yaml"
MANIFEST_FILENAME = "Cargo.toml"


def find_workspace_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configured workspace root by walking up the directory tree.

    A root is a directory holding a .cratepub.yaml with a Cargo.toml beside
    it, so a stray config file outside any Cargo project is ignored.

    Args:
        start_path: Starting directory (defaults to current working directory)

    Returns:
        Path to the workspace root, or None if not found

    Example:
        >>> # From WS/crates/foo/src, finds WS
        >>> root = find_workspace_root()
        >>> print(root)
        /path/to/WS
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()

    for parent in [current] + list(current.parents):
        if (parent / CONFIG_FILENAME).is_file() and (parent / MANIFEST_FILENAME).is_file():
            return parent

    return None


def get_workspace_config_path(start_path: Optional[Path] = None) -> Optional[Path]:
    """Get the .cratepub.yaml path for the current workspace, or None."""
    root = find_workspace_root(start_path)
    if root:
        return root / CONFIG_FILENAME
    return None
