"""Pytest configuration and fixtures for cratepub tests"""
import io
import json
import os
import tempfile
from pathlib import Path

import pytest
from rich.console import Console

from cratepub.tools import ToolResult, ToolRunner


class FakeToolRunner(ToolRunner):
    """Records every call; answers from canned results."""

    def __init__(self, metadata=None, query_ok=True, dry_run_ok=True, publish_ok=True,
                 dry_run_output="dry-run ok", publish_output="Uploading"):
        self.metadata = metadata if metadata is not None else {"packages": []}
        self.query_ok = query_ok
        self.dry_run_ok = dry_run_ok
        self.publish_ok = publish_ok
        self.dry_run_output = dry_run_output
        self.publish_output = publish_output
        self.calls = []
        self.cwd_at_call = []

    def query_workspace(self, root):
        self.calls.append(("query", Path(root)))
        if not self.query_ok:
            return ToolResult(success=False, output="error: could not find `Cargo.toml`", returncode=101)
        return ToolResult(success=True, output=json.dumps(self.metadata), returncode=0)

    def dry_run_publish(self, directory):
        self.calls.append(("dry_run", Path(directory)))
        self.cwd_at_call.append(Path.cwd())
        return ToolResult(success=self.dry_run_ok, output=self.dry_run_output, returncode=0 if self.dry_run_ok else 101)

    def publish(self, directory):
        self.calls.append(("publish", Path(directory)))
        self.cwd_at_call.append(Path.cwd())
        return ToolResult(success=self.publish_ok, output=self.publish_output, returncode=0 if self.publish_ok else 101)

    @property
    def publish_calls(self):
        return [c for c in self.calls if c[0] in ("dry_run", "publish")]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def workspace(temp_dir):
    """A two-crate workspace on disk: a/ and b/, plus a registry dependency"""
    (temp_dir / "Cargo.toml").write_text('[workspace]\nmembers = ["a", "b"]\n')
    for name in ("a", "b"):
        (temp_dir / name).mkdir()
        (temp_dir / name / "Cargo.toml").write_text(f'[package]\nname = "{name.upper()}"\n')
    return temp_dir


@pytest.fixture
def metadata(workspace):
    """`cargo metadata` document for the workspace fixture"""
    return {
        "packages": [
            {"name": "A", "manifest_path": str(workspace / "a" / "Cargo.toml"), "source": None},
            {
                "name": "serde",
                "manifest_path": "/home/u/.cargo/registry/src/serde-1.0.0/Cargo.toml",
                "source": "registry+https://github.com/rust-lang/crates.io-index",
            },
            {"name": "B", "manifest_path": str(workspace / "b" / "Cargo.toml"), "source": None},
        ],
        "workspace_root": str(workspace),
    }


@pytest.fixture
def fake_tools(metadata):
    return FakeToolRunner(metadata=metadata)


@pytest.fixture
def console():
    """Plain rich Console writing into a buffer; read it with console.file.getvalue()"""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


@pytest.fixture
def restore_cwd():
    """Put the process directory back even if a test leaves it elsewhere"""
    before = os.getcwd()
    yield Path(before)
    os.chdir(before)


@pytest.fixture
def make_tools(metadata):
    """Factory for FakeToolRunner preloaded with the workspace metadata"""
    def _make(**kwargs):
        kwargs.setdefault("metadata", metadata)
        return FakeToolRunner(**kwargs)
    return _make
