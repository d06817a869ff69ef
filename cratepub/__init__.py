"""
cratepub: publish a single crate out of a Cargo workspace.

The package provides:
- WorkspaceListing / PackageRecord: local crates read from `cargo metadata`.
- ToolRunner: the external tools (cargo) behind a small interface;
  CargoToolRunner is the real implementation.
- Publisher: the list -> select -> resolve -> dry-run -> publish workflow.
- Config: YAML configuration with workspace and global files.
"""

from .config import Config
from .errors import (
    PublisherError,
    WorkspaceError,
    EmptySelectionError,
    PackageNotFoundError,
    DryRunError,
    PublishFailedError,
)
from .workspace import PackageRecord, WorkspaceListing
from .step import Step, CommandStep
from .cargo import CargoMetadataStep, CargoPublishStep
from .tools import ToolResult, ToolRunner, CargoToolRunner
from .workdir import WorkingDirectory
from .envvalidate import EnvIssue, ToolValidator
from .publisher import Publisher, PublishStage, PublishOutcome

__all__ = [
    "Config",
    # Errors
    "PublisherError",
    "WorkspaceError",
    "EmptySelectionError",
    "PackageNotFoundError",
    "DryRunError",
    "PublishFailedError",
    # Workspace
    "PackageRecord",
    "WorkspaceListing",
    # Steps
    "Step",
    "CommandStep",
    "CargoMetadataStep",
    "CargoPublishStep",
    # Tools
    "ToolResult",
    "ToolRunner",
    "CargoToolRunner",
    "WorkingDirectory",
    "EnvIssue",
    "ToolValidator",
    # Workflow
    "Publisher",
    "PublishStage",
    "PublishOutcome",
]
