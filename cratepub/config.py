"""Configuration management for cratepub."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import yaml


GLOBAL_CONFIG_PATH = Path.home() / ".cratepub.yaml"


class Config:
    """Manages cratepub configuration with hierarchical lookup.

    Config hierarchy (higher priority first):
    1. Workspace config (<workspace root>/.cratepub.yaml)
    2. Global config (~/.cratepub.yaml)

    Workspace values override global ones. Configuration is read-only:
    the files are edited by hand.
    """

    def __init__(self, config_path: Optional[Path] = None, enable_hierarchy: bool = True):
        """Initialize config.

        Args:
            config_path: Specific config file to use. If None, uses global config.
            enable_hierarchy: If True, falls back to the global config for
                             keys missing from config_path.
        """
        self.config_path = Path(config_path) if config_path else GLOBAL_CONFIG_PATH
        self.enable_hierarchy = enable_hierarchy
        self._data: dict[str, Any] = {}
        self._global_data: dict[str, Any] = {}
        self.load()

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RuntimeError(f"Failed to load config from {path}: {e}") from e
        if not isinstance(loaded, dict):
            raise RuntimeError(f"Failed to load config from {path}: expected a mapping")
        return loaded

    def load(self) -> None:
        """Load configuration from file(s)."""
        self._data = self._read(self.config_path) if self.config_path.exists() else {}

        if self.enable_hierarchy and self.config_path != GLOBAL_CONFIG_PATH and GLOBAL_CONFIG_PATH.exists():
            self._global_data = self._read(GLOBAL_CONFIG_PATH)
        else:
            self._global_data = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value, local first, then global, then default."""
        if key in self._data:
            return self._data[key]
        if key in self._global_data:
            return self._global_data[key]
        return default

    @property
    def cargo(self) -> str:
        """Cargo executable name or path."""
        return self.get("cargo") or "cargo"

    @property
    def publish_args(self) -> List[str]:
        """Extra arguments passed to both `cargo publish` invocations."""
        value = self.get("publish_args") or []
        if isinstance(value, str):
            return value.split()
        return [str(v) for v in value]

    @property
    def change_process_cwd(self) -> bool:
        return bool(self.get("change_process_cwd", False))

    @property
    def check_tools(self) -> bool:
        """Verify cargo is on PATH before querying the workspace."""
        return bool(self.get("check_tools", True))

    @classmethod
    def load_with_workspace_context(cls, start_path: Optional[Path] = None) -> Config:
        """Load config with workspace context if available.

        Uses the workspace's .cratepub.yaml with global fallback when one is
        found above start_path, otherwise the global config alone.
        """
        from .paths import get_workspace_config_path

        workspace_config_path = get_workspace_config_path(start_path)
        if workspace_config_path:
            return cls(config_path=workspace_config_path, enable_hierarchy=True)
        return cls(config_path=GLOBAL_CONFIG_PATH, enable_hierarchy=False)
