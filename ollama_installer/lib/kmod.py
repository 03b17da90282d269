from __future__ import annotations

import logging
import platform
from typing import List, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def loaded_modules() -> List[str]:
    r = run_cmd(["lsmod"], check=False)
    names = []
    for line in r.stdout.splitlines()[1:]:
        parts = line.split()
        if parts:
            names.append(parts[0])
    return names


def module_loaded(prefix: str) -> bool:
    """Same test as `lsmod | grep -q prefix`, restricted to module names."""

    return any(prefix in name for name in loaded_modules())


def kernel_release() -> str:
    return platform.release()


def parse_dkms_added(status: str) -> List[str]:
    """Module/version pairs that dkms has added but not built ("nvidia/550.54.15")."""

    out = []
    for line in status.splitlines():
        if "added" in line:
            name = line.split(":", 1)[0].strip()
            if name:
                out.append(name)
    return out


def dkms_install_added(sudo: Sequence[str] = (), *, dry_run: bool = False) -> List[str]:
    r = run_cmd([*sudo, "dkms", "status"], check=False)
    added = parse_dkms_added(r.stdout)
    for module in added:
        run_cmd([*sudo, "dkms", "install", module], dry_run=dry_run)
    return added


def modprobe(module: str, sudo: Sequence[str] = (), *, dry_run: bool = False) -> None:
    run_cmd([*sudo, "modprobe", module], dry_run=dry_run)
