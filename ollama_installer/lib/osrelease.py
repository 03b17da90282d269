from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..errors import InstallError

OS_RELEASE_PATH = "/etc/os-release"


@dataclass(frozen=True)
class OsRelease:
    id: str
    version_id: str


@dataclass(frozen=True)
class CudaTarget:
    """Which NVIDIA repository to use: family is "rpm" or "deb"."""

    family: str
    distro: str
    version: str

    @property
    def slug(self) -> str:
        return f"{self.distro}{self.version}"


def parse_os_release(text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw.strip("\"'")]
        values[key.strip()] = parts[0] if parts else ""
    return values


def read_os_release(path: str = OS_RELEASE_PATH) -> OsRelease:
    p = Path(path)
    if not p.is_file():
        raise InstallError("Unknown distribution. Skipping CUDA installation.")
    values = parse_os_release(p.read_text(encoding="utf-8", errors="ignore"))
    return OsRelease(id=values.get("ID", ""), version_id=values.get("VERSION_ID", ""))


def resolve_cuda_target(os_release: OsRelease) -> Optional[CudaTarget]:
    """Map a distribution to its NVIDIA CUDA repository, or None if unsupported."""

    name, version = os_release.id, os_release.version_id
    if name in {"centos", "rhel"}:
        return CudaTarget("rpm", "rhel", version)
    if name == "rocky":
        return CudaTarget("rpm", "rhel", version[:1])
    if name == "fedora":
        return CudaTarget("rpm", "fedora", version)
    if name == "amzn":
        return CudaTarget("rpm", "fedora", "35")
    if name == "debian":
        return CudaTarget("deb", "debian", version)
    if name == "ubuntu":
        return CudaTarget("deb", "ubuntu", version.replace(".", ""))
    return None
