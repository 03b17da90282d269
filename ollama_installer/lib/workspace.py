from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TempWorkspace:
    """Scratch directory for downloads, created on first use.

    Lazy creation keeps preflight free of filesystem side effects; cleanup()
    is safe to call whether or not the directory was ever created.
    """

    def __init__(self, prefix: str = "ollama-install-"):
        self._prefix = prefix
        self._path: Optional[Path] = None

    @property
    def created(self) -> bool:
        return self._path is not None

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = Path(tempfile.mkdtemp(prefix=self._prefix))
            logger.debug("Created temp workspace %s", self._path)
        return self._path

    def file(self, name: str) -> Path:
        return self.path / name

    def cleanup(self) -> None:
        if self._path is None:
            return
        shutil.rmtree(self._path, ignore_errors=True)
        logger.debug("Removed temp workspace %s", self._path)
        self._path = None

    def __enter__(self) -> "TempWorkspace":
        return self

    def __exit__(self, *exc) -> None:
        self.cleanup()
