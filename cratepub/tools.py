from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .cargo import CargoMetadataStep, CargoPublishStep

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    success: bool
    output: str
    returncode: Optional[int] = None

    @classmethod
    def from_step(cls, res: Dict[str, Any], output: Optional[str] = None) -> ToolResult:
        text = res.get("stdout", "") if output is None else output
        if not text and res.get("status") != "success":
            # Nothing captured (e.g. the executable never started)
            text = res.get("error") or ""
        return cls(success=res.get("status") == "success", output=text, returncode=res.get("returncode"))


class ToolRunner(ABC):
    """The external tools the publish workflow depends on."""

    @abstractmethod
    def query_workspace(self, root: Path) -> ToolResult:
        """Return workspace metadata JSON in ``output`` on success."""

    @abstractmethod
    def dry_run_publish(self, directory: Path) -> ToolResult:
        """Validate the crate in ``directory`` without uploading."""

    @abstractmethod
    def publish(self, directory: Path) -> ToolResult:
        """Publish the crate in ``directory``."""


class CargoToolRunner(ToolRunner):
    """ToolRunner backed by the cargo CLI.

    Config:
    - cargo: str – cargo executable (default 'cargo')
    - publish_args: List[str] – extra arguments for both publish invocations
    - env: dict[str, str] – environment for cargo (default: inherited)
    - show: bool – stream cargo publish output while it runs
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.config = config or {}

    @property
    def cargo(self) -> str:
        return self.config.get("cargo") or "cargo"

    def query_workspace(self, root: Path) -> ToolResult:
        res = CargoMetadataStep(
            "metadata",
            {"cargo": self.cargo, "cwd": str(root), "env": self.config.get("env")},
        ).run()
        if res.get("status") == "success":
            return ToolResult.from_step(res)
        # stdout is empty or partial JSON on failure; cargo explains itself on stderr
        return ToolResult.from_step(res, output=res.get("stderr", ""))

    def _publish(self, directory: Path, dry_run: bool) -> ToolResult:
        extra: List[str] = list(self.config.get("publish_args") or [])
        logger.info(f"cargo publish{' --dry-run' if dry_run else ''} in {directory}")
        res = CargoPublishStep(
            "dry_run" if dry_run else "publish",
            {
                "cargo": self.cargo,
                "dry_run": dry_run,
                "extra_args": extra,
                "cwd": str(directory),
                "env": self.config.get("env"),
                "show": bool(self.config.get("show", False)),
            },
        ).run()
        return ToolResult.from_step(res)

    def dry_run_publish(self, directory: Path) -> ToolResult:
        return self._publish(directory, dry_run=True)

    def publish(self, directory: Path) -> ToolResult:
        return self._publish(directory, dry_run=False)
