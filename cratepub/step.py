from __future__ import annotations

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class Step(ABC):
    """A granular unit of work.

    Steps return a structured, JSON-serializable dict with at least a
    ``status`` key ('success' or 'error').
    """

    def __init__(self, id: str, config: Optional[Dict[str, Any]] = None) -> None:
        self.id = id
        self.config = config or {}

    @abstractmethod
    def run(self) -> Dict[str, Any]:
        """Execute the step and return structured output."""

    def validate(self) -> bool:
        """Optional pre-run validation hook."""
        return True


class CommandStep(Step):
    """Run a command and capture its output.

    Config:
    - cmd: list[str] – Required. Command to execute.
    - env: dict[str, str] – Optional environment overrides.
    - cwd: str – optional working directory.
    - merge_stderr: bool – if True, stderr is folded into stdout in the order
      the process wrote it (default False).
    - timeout: float – Optional timeout in seconds (default: wait forever).
    - show: bool – echo output lines while the command runs (default False).
    """

    def validate(self) -> bool:
        cmd = self.config.get("cmd")
        return isinstance(cmd, list) and bool(cmd)

    def run(self) -> Dict[str, Any]:
        if not self.validate():
            return {"status": "error", "error": "CommandStep requires config['cmd'] as non-empty list"}
        cmd: List[str] = [str(c) for c in self.config["cmd"]]
        env = self.config.get("env")
        cwd = self.config.get("cwd")
        timeout = self.config.get("timeout")
        merge = bool(self.config.get("merge_stderr", False))
        show = bool(self.config.get("show", False))

        logger.debug(f"{self.id}: running {' '.join(cmd)} (cwd={cwd or '.'})")
        start = time.time()
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge else subprocess.PIPE,
                text=True,
                env=env,
                cwd=str(cwd) if cwd else None,
            )
        except OSError as e:
            # Executable missing or cwd unusable
            logger.debug(f"{self.id}: failed to start: {e}")
            return {
                "status": "error",
                "error": str(e),
                "stdout": "",
                "stderr": "",
                "returncode": None,
                "duration": time.time() - start,
            }

        error: Optional[str] = None
        try:
            if show:
                stdout_text, stderr_text = self._stream(proc, timeout)
            else:
                stdout_text, stderr_text = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            error = f"Timed out after {e.timeout} seconds"
            proc.kill()
            stdout_text, stderr_text = proc.communicate()

        duration = time.time() - start
        rc = proc.returncode if proc.returncode is not None else -1
        result: Dict[str, Any] = {
            "status": "success" if rc == 0 and error is None else "error",
            "stdout": (stdout_text or "").rstrip(),
            "stderr": (stderr_text or "").rstrip(),
            "returncode": rc,
            "duration": duration,
        }
        if result["status"] == "error":
            result["error"] = error or f"Process exited with code {rc}"
        logger.debug(f"{self.id}: {result['status']} (rc={rc}, {duration:.2f}s)")
        return result

    def _stream(self, proc: subprocess.Popen, timeout: Optional[float]) -> tuple[str, str]:
        # Only used for merged output, where a single reader cannot deadlock.
        if proc.stderr is not None:
            return proc.communicate(timeout=timeout)
        buf: List[str] = []
        if proc.stdout:
            for line in iter(proc.stdout.readline, ""):
                buf.append(line)
                print(line, end="", flush=True)
            proc.stdout.close()
        proc.wait(timeout=timeout)
        return "".join(buf), ""
