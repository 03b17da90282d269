from __future__ import annotations

import grp
import logging
import os
import platform
import pwd
from typing import List, Optional, Sequence, Tuple

from ..errors import InsufficientPrivileges, UnsupportedEnvironment
from .command import available
from .env import HostContext

logger = logging.getLogger(__name__)

_ARCH_MAP = {
    "x86_64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def check_platform(system: Optional[str] = None) -> None:
    system = platform.system() if system is None else system
    if system != "Linux":
        raise UnsupportedEnvironment("This script is intended to run on Linux only.")


def resolve_arch(machine: str) -> str:
    """Map `uname -m` to a download target (amd64 | arm64)."""

    arch = _ARCH_MAP.get(machine)
    if arch is None:
        raise UnsupportedEnvironment(f"Unsupported architecture: {machine}")
    return arch


def resolve_privilege(uid: int) -> Tuple[str, ...]:
    """Return the elevation prefix for privileged commands."""

    if uid == 0:
        return ()
    if not available("sudo"):
        raise InsufficientPrivileges("This script requires superuser permissions. Please re-run as root.")
    return ("sudo",)


def missing_tools(tools: Sequence[str]) -> List[str]:
    return [t for t in tools if not available(t)]


def _user_and_group(uid: int) -> Tuple[str, str]:
    try:
        pw = pwd.getpwuid(uid)
    except KeyError:
        return str(uid), str(os.getgid())
    try:
        group = grp.getgrgid(pw.pw_gid).gr_name
    except KeyError:
        group = str(pw.pw_gid)
    return pw.pw_name, group


def detect_host(
    *,
    uid: Optional[int] = None,
    machine: Optional[str] = None,
    home: Optional[str] = None,
    search_path: Optional[str] = None,
) -> HostContext:
    """Resolve architecture, privilege and user identity for this run.

    Raises before anything on the host is touched.
    """

    uid = os.getuid() if uid is None else uid
    machine = platform.machine() if machine is None else machine

    arch = resolve_arch(machine)
    sudo = resolve_privilege(uid)
    user, group = _user_and_group(uid)

    host = HostContext(
        user=user,
        group=group,
        uid=uid,
        home=home or os.path.expanduser("~"),
        search_path=os.environ.get("PATH", "") if search_path is None else search_path,
        machine=machine,
        arch=arch,
        sudo=sudo,
    )
    logger.debug("Host: user=%s group=%s arch=%s sudo=%s", host.user, host.group, host.arch, bool(host.sudo))
    return host
