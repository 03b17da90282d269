from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from ..errors import InstallError
from .command import run_cmd
from .download import download_file
from .osrelease import CudaTarget
from .pkg import PackageManager
from .workspace import TempWorkspace

logger = logging.getLogger(__name__)

EPEL_URL = "https://dl.fedoraproject.org/pub/epel/epel-release-latest-{version}.noarch.rpm"
APT_SOURCES = "/etc/apt/sources.list"
CONTRIB_LIST = "/etc/apt/sources.list.d/contrib.list"


def repo_url(repo_base: str, target: CudaTarget, machine: str, filename: str) -> str:
    return f"{repo_base}/{target.slug}/{machine}/{filename}"


def contrib_sources(sources: str) -> str:
    """sources.list with the first "main" of every line swapped for "contrib"."""

    lines = [line.replace("main", "contrib", 1) for line in sources.splitlines()]
    return "\n".join(lines) + ("\n" if lines else "")


def install_cuda_driver_rpm(
    pm: PackageManager,
    target: CudaTarget,
    *,
    repo_base: str,
    machine: str,
) -> None:
    logger.info("Installing NVIDIA repository...")
    pm.add_repository(repo_url(repo_base, target, machine, f"cuda-{target.slug}.repo"))

    if target.distro == "rhel":
        # dkms and libvdpau come from EPEL.
        logger.info("Installing EPEL repository...")
        pm.install_packages([EPEL_URL.format(version=target.version)], check=False)

    logger.info("Installing CUDA driver...")
    if target.slug == "rhel7":
        pm.install_packages(["nvidia-driver-latest-dkms"])
    pm.install_packages(["cuda-drivers"])


def _enable_debian_contrib(sudo: Sequence[str], *, dry_run: bool) -> None:
    src = Path(APT_SOURCES)
    if not src.is_file():
        logger.warning("%s not found; not enabling contrib sources", src)
        return
    logger.info("Enabling contrib sources...")
    run_cmd(
        [*sudo, "tee", CONTRIB_LIST],
        input_text=contrib_sources(src.read_text(encoding="utf-8")),
        dry_run=dry_run,
    )


def install_cuda_driver_deb(
    pm: PackageManager,
    target: CudaTarget,
    *,
    repo_base: str,
    machine: str,
    keyring: str,
    workspace: TempWorkspace,
) -> None:
    logger.info("Installing NVIDIA repository...")
    url = repo_url(repo_base, target, machine, keyring)
    if pm.dry_run:
        logger.info("Would download %s", url)
        keyring_path = workspace.file(keyring)
    else:
        keyring_path = download_file(url, workspace.file(keyring))

    if target.distro == "debian":
        _enable_debian_contrib(pm.sudo, dry_run=pm.dry_run)

    logger.info("Installing CUDA driver...")
    pm.add_repository(str(keyring_path))
    pm.install_packages(["cuda-drivers"])


def install_cuda_driver(
    pm: PackageManager,
    target: CudaTarget,
    *,
    repo_base: str,
    machine: str,
    keyring: str,
    workspace: TempWorkspace,
) -> None:
    if pm.family != target.family:
        raise InstallError(
            f"{target.distro} needs a {target.family} package manager, found {pm.name}. Skipping CUDA installation."
        )
    if target.family == "rpm":
        install_cuda_driver_rpm(pm, target, repo_base=repo_base, machine=machine)
    else:
        install_cuda_driver_deb(
            pm, target, repo_base=repo_base, machine=machine, keyring=keyring, workspace=workspace
        )
