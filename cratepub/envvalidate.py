from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class EnvIssue:
    kind: str         # 'tool_missing' | 'tool_version'
    name: str         # tool name
    message: str
    details: Optional[Dict[str, Any]] = None


class ToolValidator:
    """Validate required CLI tools exist and optionally meet minimum version.

    Each item in tools should be a dict with:
      - name: str (executable name or path)
      - min_version: str (optional, e.g. '1.66.0')
      - version_args: List[str] (optional override, default: ['--version'])

    Issues are collected and returned, never raised.
    """

    def __init__(self, tools: List[Dict[str, Any]]) -> None:
        self.tools = tools

    def _parse_version(self, text: str) -> Optional[str]:
        m = re.search(r"\b(\d+\.\d+(?:\.\d+)*)\b", text)
        return m.group(1) if m else None

    def _version_tuple(self, s: str) -> List[int]:
        return [int(p) for p in re.split(r"[._-]", s) if p.isdigit()]

    def run(self) -> List[EnvIssue]:
        issues: List[EnvIssue] = []
        for t in self.tools:
            name = t.get("name")
            if not name:
                continue
            exe = shutil.which(name)
            if not exe:
                issues.append(EnvIssue(kind="tool_missing", name=name, message=f"Required tool '{name}' not found on PATH"))
                continue
            minv = t.get("min_version")
            if not minv:
                continue
            args = t.get("version_args") or ["--version"]
            try:
                cp = subprocess.run([exe] + args, capture_output=True, text=True, check=False)
            except OSError as e:
                issues.append(EnvIssue(kind="tool_version", name=name, message=f"Failed to check version for '{name}': {e}"))
                continue
            found = self._parse_version((cp.stdout or "") + "\n" + (cp.stderr or ""))
            if not found or self._version_tuple(found) < self._version_tuple(minv):
                issues.append(
                    EnvIssue(
                        kind="tool_version",
                        name=name,
                        message=f"Tool '{name}' version {found or 'unknown'} is below required {minv}",
                        details={"found": found, "required": minv},
                    )
                )
        return issues
