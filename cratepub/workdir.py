from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class WorkingDirectory:
    """Scoped working directory for one crate.

    The target directory is carried as an explicit ``path`` that callers pass
    to subprocesses. With ``change_process_cwd=True`` the process directory is
    also switched on enter. Either way the directory current at enter is
    restored on exit, whether the block succeeded or raised.
    """

    def __init__(self, path: PathLike, change_process_cwd: bool = False) -> None:
        self.path = Path(path)
        self.change_process_cwd = change_process_cwd
        self.original: Optional[Path] = None

    def __enter__(self) -> WorkingDirectory:
        self.original = Path.cwd()
        if self.change_process_cwd:
            logger.debug(f"chdir {self.original} -> {self.path}")
            os.chdir(self.path)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.original is not None:
            if self.change_process_cwd:
                logger.debug(f"chdir back to {self.original}")
            os.chdir(self.original)
