from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..errors import InstallError, InstallStopped
from ..lib import kmod
from ..lib.env import host_from_state
from ..lib.osrelease import read_os_release, resolve_cuda_target
from ..lib.pkg import detect_package_manager

logger = logging.getLogger(__name__)


class LoadKernelModuleStep:
    step_id = "70_load_kernel_module"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        host = host_from_state(state)

        if not kmod.module_loaded("nvidia"):
            os_release = read_os_release()
            if resolve_cuda_target(os_release) is None:
                raise InstallStopped(f"Unsupported distribution {os_release.id!r}. Skipping kernel module setup.")
            pm = detect_package_manager(sudo=host.sudo, dry_run=cfg.dry_run)
            if pm is None:
                raise InstallError("Unknown package manager. Skipping CUDA installation.")

            pm.install_packages(pm.kernel_header_packages(os_release.id, kmod.kernel_release()))
            kmod.dkms_install_added(host.sudo, dry_run=cfg.dry_run)

            if kmod.module_loaded("nouveau"):
                raise InstallStopped("Reboot to complete NVIDIA CUDA driver install.")

            kmod.modprobe("nvidia", host.sudo, dry_run=cfg.dry_run)

        logger.info("NVIDIA CUDA drivers installed.")
        return state
