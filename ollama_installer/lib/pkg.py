from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Type

from .command import available, run_cmd

logger = logging.getLogger(__name__)


class PackageManager(ABC):
    """Minimal package-manager surface: register a repository, install packages."""

    name: str = ""
    family: str = ""

    def __init__(self, *, sudo: Sequence[str] = (), dry_run: bool = False):
        self.sudo = tuple(sudo)
        self.dry_run = dry_run

    @abstractmethod
    def add_repository(self, url: str) -> None:
        ...

    @abstractmethod
    def install_packages(self, packages: Sequence[str], *, check: bool = True) -> None:
        ...

    @abstractmethod
    def kernel_header_packages(self, os_id: str, kernel_release: str) -> List[str]:
        ...

    def _run(self, argv: Sequence[str], *, check: bool = True, env: Optional[Dict[str, str]] = None) -> None:
        run_cmd([*self.sudo, *argv], check=check, env=env, dry_run=self.dry_run)


class _RpmManager(PackageManager):
    family = "rpm"

    def install_packages(self, packages: Sequence[str], *, check: bool = True) -> None:
        if not packages:
            return
        self._run([self.name, "-y", "install", *packages], check=check)

    def kernel_header_packages(self, os_id: str, kernel_release: str) -> List[str]:
        if os_id == "fedora":
            return [f"kernel-devel-{kernel_release}"]
        return [f"kernel-devel-{kernel_release}", f"kernel-headers-{kernel_release}"]


class DnfManager(_RpmManager):
    name = "dnf"

    def add_repository(self, url: str) -> None:
        self._run(["dnf", "config-manager", "--add-repo", url])


class YumManager(_RpmManager):
    name = "yum"

    def add_repository(self, url: str) -> None:
        self.install_packages(["yum-utils"])
        self._run(["yum-config-manager", "--add-repo", url])


class AptManager(PackageManager):
    name = "apt-get"
    family = "deb"

    def add_repository(self, keyring_deb: str) -> None:
        """Register a repository shipped as a keyring .deb, then refresh indexes."""

        self._run(["dpkg", "-i", keyring_deb])
        self._run(["apt-get", "update"])

    def install_packages(self, packages: Sequence[str], *, check: bool = True) -> None:
        if not packages:
            return
        # sudo drops the environment unless asked to keep it.
        prefix = [*self.sudo, "-E"] if self.sudo else []
        run_cmd(
            [*prefix, "apt-get", "-y", "install", *packages, "-q"],
            check=check,
            env={"DEBIAN_FRONTEND": "noninteractive"},
            dry_run=self.dry_run,
        )

    def kernel_header_packages(self, os_id: str, kernel_release: str) -> List[str]:
        return [f"linux-headers-{kernel_release}"]


PACKAGE_MANAGERS: Dict[str, Type[PackageManager]] = {
    "dnf": DnfManager,
    "yum": YumManager,
    "apt-get": AptManager,
}


def detect_package_manager(*, sudo: Sequence[str] = (), dry_run: bool = False) -> Optional[PackageManager]:
    """First available of dnf, yum, apt-get."""

    for name, cls in PACKAGE_MANAGERS.items():
        if available(name):
            logger.debug("Package manager: %s", name)
            return cls(sudo=sudo, dry_run=dry_run)
    return None
