"""Error types raised by the publish workflow.

Each error maps to a distinct process exit code. None of them are retried.
"""
from __future__ import annotations

from typing import Optional


class PublisherError(Exception):
    """Base class for all workflow failures."""

    exit_code = 1

    def __init__(self, message: str, output: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.output = output


class WorkspaceError(PublisherError):
    """Workspace metadata could not be queried or understood."""

    exit_code = 2


class EmptySelectionError(PublisherError):
    """No crate name was entered at the prompt."""

    exit_code = 3


class PackageNotFoundError(PublisherError):
    """The entered name does not match any local crate."""

    exit_code = 4

    def __init__(self, name: str) -> None:
        super().__init__(f"Project '{name}' not found")
        self.name = name


class DryRunError(PublisherError):
    """`cargo publish --dry-run` reported failure."""

    exit_code = 5


class PublishFailedError(PublisherError):
    """`cargo publish` reported failure."""

    exit_code = 6
