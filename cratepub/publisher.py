"""The publish workflow: list, select, resolve, dry-run, publish.

The flow is strictly linear and fails fast. Every failure surfaces as a
:class:`~cratepub.errors.PublisherError` subclass; nothing is retried.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .envvalidate import ToolValidator
from .errors import (
    DryRunError,
    EmptySelectionError,
    PackageNotFoundError,
    PublishFailedError,
    PublisherError,
    WorkspaceError,
)
from .tools import ToolResult, ToolRunner
from .workdir import WorkingDirectory
from .workspace import PackageRecord, WorkspaceListing

logger = logging.getLogger(__name__)

PROMPT = "Enter the name of the project to publish"
RULE = "=============================="


class PublishStage(str, Enum):
    START = "start"
    LISTED = "listed"
    SELECTED = "selected"
    RESOLVED = "resolved"
    DRY_RUN_OK = "dry_run_ok"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass
class PublishOutcome:
    target: PackageRecord
    dry_run: ToolResult
    publish: ToolResult


def _typer_prompt(text: str) -> str:
    # default="" lets an empty answer through instead of re-prompting
    try:
        return typer.prompt(text, default="", show_default=False)
    except typer.Abort:
        return ""


class Publisher:
    """Publish one local crate of a Cargo workspace.

    Args:
        tools: the external tools (cargo in production, a fake in tests)
        console: where banners go (default: a new rich Console on stdout)
        prompt: called once with the prompt text, returns the raw answer
        root: workspace root to query (default: current directory)
        change_process_cwd: also chdir into the crate while publishing
        validators: preflight checks run before the workspace query
    """

    def __init__(
        self,
        tools: ToolRunner,
        console: Optional[Console] = None,
        prompt: Optional[Callable[[str], str]] = None,
        root: Optional[Path] = None,
        change_process_cwd: bool = False,
        validators: Optional[List[ToolValidator]] = None,
    ) -> None:
        self.tools = tools
        self.console = console or Console()
        self.prompt = prompt or _typer_prompt
        self.root = Path(root) if root else Path.cwd()
        self.change_process_cwd = change_process_cwd
        self.validators = list(validators or [])
        self.stage = PublishStage.START

    def _say(self, text: str = "") -> None:
        # Paths and names are shown in full and as typed
        self.console.print(text, soft_wrap=True, emoji=False)

    def _preflight(self) -> None:
        for validator in self.validators:
            issues = validator.run()
            if issues:
                raise WorkspaceError("; ".join(i.message for i in issues))

    def list_packages(self) -> WorkspaceListing:
        """Query the workspace and print the name of every local crate."""
        self._preflight()
        self._say("📚 Fetching workspace crate list...")
        res = self.tools.query_workspace(self.root)
        if not res.success:
            raise WorkspaceError(f"Failed to read workspace metadata in {self.root}", output=res.output)
        listing = WorkspaceListing.from_json(res.output, root=self.root)
        logger.info(f"{len(listing)} local crate(s) in {self.root}")

        self._say("🧩 Found the following crates:")
        for name in listing.names():
            self._say(f"- {escape(name)}")
        self._say()
        self.stage = PublishStage.LISTED
        return listing

    def select_target(self) -> str:
        """Read the crate name once; empty input is fatal."""
        name = (self.prompt(PROMPT) or "").strip()
        if not name:
            raise EmptySelectionError("No project name entered, exiting")
        self.stage = PublishStage.SELECTED
        return name

    def resolve(self, listing: WorkspaceListing, name: str) -> PackageRecord:
        target = listing.find(name)
        if target is None:
            raise PackageNotFoundError(name)
        logger.debug(f"resolved {name} -> {target.manifest_path}")
        self._say()
        self._say(RULE)
        self._say(f"📦 target: {escape(target.name)}")
        self._say(f"📁 path: {escape(str(target.directory))}")
        self._say(RULE)
        self.stage = PublishStage.RESOLVED
        return target

    def dry_run(self, target: PackageRecord, directory: Path) -> ToolResult:
        self._say("🧪 Running dry-run...")
        res = self.tools.dry_run_publish(directory)
        if not res.success:
            raise DryRunError(f"dry-run failed: {target.name}", output=res.output)
        self._say(f"✔ dry-run succeeded: {escape(target.name)}")
        self.stage = PublishStage.DRY_RUN_OK
        return res

    def publish(self, target: PackageRecord, directory: Path) -> ToolResult:
        self._say(f"🚀 Publishing {escape(target.name)} ...")
        res = self.tools.publish(directory)
        if not res.success:
            raise PublishFailedError(f"publish failed: {target.name}", output=res.output)
        self._say(f"✅ Published: {escape(target.name)}")
        self.stage = PublishStage.PUBLISHED
        return res

    def run(self) -> PublishOutcome:
        """Drive the whole workflow; raises PublisherError on the first failure."""
        try:
            listing = self.list_packages()
            name = self.select_target()
            target = self.resolve(listing, name)
            with WorkingDirectory(target.directory, change_process_cwd=self.change_process_cwd) as wd:
                dry = self.dry_run(target, wd.path)
                pub = self.publish(target, wd.path)
            return PublishOutcome(target=target, dry_run=dry, publish=pub)
        except PublisherError:
            self.stage = PublishStage.FAILED
            raise
