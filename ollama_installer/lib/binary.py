from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from ..errors import InstallError
from .command import run_cmd

logger = logging.getLogger(__name__)


def choose_bindir(candidates: Sequence[str], search_path: str) -> str:
    """First candidate that is an entry of PATH."""

    entries = {os.path.normpath(p) for p in search_path.split(os.pathsep) if p}
    for bindir in candidates:
        if os.path.normpath(bindir) in entries:
            return bindir
    raise InstallError(f"None of {', '.join(candidates)} is on PATH; cannot choose an install location.")


def install_binary(
    src: Path,
    bindir: str,
    *,
    sudo: Sequence[str] = (),
    name: str = "ollama",
    dry_run: bool = False,
) -> str:
    """Install src as bindir/name owned by root:root, mode 755."""

    dest = str(Path(bindir) / name)
    run_cmd([*sudo, "install", "-o0", "-g0", "-m755", "-d", bindir], dry_run=dry_run)
    run_cmd([*sudo, "install", "-o0", "-g0", "-m755", str(src), dest], dry_run=dry_run)
    return dest
