"""Workspace listing built from `cargo metadata` output."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .errors import WorkspaceError


@dataclass(frozen=True)
class PackageRecord:
    name: str
    manifest_path: Path

    @property
    def directory(self) -> Path:
        """Directory holding the crate's Cargo.toml."""
        return self.manifest_path.parent


@dataclass(frozen=True)
class WorkspaceListing:
    """Local crates of one workspace snapshot, in metadata order."""

    packages: Tuple[PackageRecord, ...] = ()

    def __iter__(self) -> Iterator[PackageRecord]:
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)

    def names(self) -> List[str]:
        return [p.name for p in self.packages]

    def find(self, name: str) -> Optional[PackageRecord]:
        """Exact, case-sensitive lookup by crate name."""
        for p in self.packages:
            if p.name == name:
                return p
        return None

    @classmethod
    def from_metadata(cls, data: Dict[str, Any], root: Optional[Path] = None) -> WorkspaceListing:
        """Build a listing from a parsed `cargo metadata` document.

        Only packages whose ``source`` is null or absent are kept; anything
        with a source was fetched from a registry or git and is not
        publishable from here. Relative manifest paths resolve against
        ``root`` (default: current directory).
        """
        packages = data.get("packages") if isinstance(data, dict) else None
        if not isinstance(packages, list):
            raise WorkspaceError("Workspace metadata has no 'packages' list")

        base = Path(root) if root else Path.cwd()
        records: List[PackageRecord] = []
        seen: set[str] = set()
        for entry in packages:
            if not isinstance(entry, dict) or entry.get("source") is not None:
                continue
            name = entry.get("name")
            manifest = entry.get("manifest_path")
            if not name or not manifest:
                raise WorkspaceError(f"Workspace metadata entry is missing name or manifest_path: {entry!r}")
            if name in seen:
                raise WorkspaceError(f"Workspace metadata lists local package '{name}' more than once")
            seen.add(name)
            path = Path(manifest)
            if not path.is_absolute():
                path = base / path
            records.append(PackageRecord(name=name, manifest_path=path))
        return cls(packages=tuple(records))

    @classmethod
    def from_json(cls, text: Union[str, bytes], root: Optional[Path] = None) -> WorkspaceListing:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise WorkspaceError(f"Workspace metadata is not valid JSON: {e}") from e
        return cls.from_metadata(data, root=root)
