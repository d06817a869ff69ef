from __future__ import annotations

from typing import Any, Dict, List

from .step import CommandStep, Step


class CargoMetadataStep(Step):
    """Run `cargo metadata --no-deps --format-version=1`.

    Config:
    - cargo: str (optional) – cargo executable (default 'cargo')
    - cwd, env, timeout – standard

    stdout carries the JSON document; stderr is kept apart for diagnostics.
    """

    def run(self) -> Dict[str, Any]:
        cfg = self.config
        cmd: List[str] = [cfg.get("cargo") or "cargo", "metadata", "--no-deps", "--format-version=1"]

        return CommandStep(
            id=f"{self.id}__cargometadata",
            config={
                "cmd": cmd,
                "cwd": cfg.get("cwd"),
                "env": cfg.get("env"),
                "timeout": cfg.get("timeout"),
            },
        ).run()


class CargoPublishStep(Step):
    """Run `cargo publish` for the crate in `cwd`.

    Config:
    - cargo: str (optional) – cargo executable (default 'cargo')
    - dry_run: bool (optional) – if True, add '--dry-run'
    - extra_args: List[str] (optional) – appended as-is, e.g. ['--allow-dirty']
    - show: bool (optional) – echo cargo output while it runs
    - cwd, env, timeout – standard

    stdout and stderr are captured combined, in the order cargo wrote them.
    """

    def run(self) -> Dict[str, Any]:
        cfg = self.config
        dry_run = bool(cfg.get("dry_run", False))
        extra: List[str] = cfg.get("extra_args") or []

        cmd: List[str] = [cfg.get("cargo") or "cargo", "publish"]
        if dry_run:
            cmd.append("--dry-run")
        cmd += [str(a) for a in extra]

        return CommandStep(
            id=f"{self.id}__cargopublish",
            config={
                "cmd": cmd,
                "cwd": cfg.get("cwd"),
                "env": cfg.get("env"),
                "timeout": cfg.get("timeout"),
                "merge_stderr": True,
                "show": bool(cfg.get("show", False)),
            },
        ).run()
