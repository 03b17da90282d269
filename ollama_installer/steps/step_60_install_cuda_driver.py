from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..errors import InstallError, InstallStopped
from ..lib.cuda import install_cuda_driver
from ..lib.env import host_from_state
from ..lib.gpu import cuda_version
from ..lib.osrelease import read_os_release, resolve_cuda_target
from ..lib.pkg import detect_package_manager

logger = logging.getLogger(__name__)


class InstallCudaDriverStep:
    step_id = "60_install_cuda_driver"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        host = host_from_state(state)
        decisions = state.setdefault("execution", {}).setdefault("decisions", {})

        os_release = read_os_release()
        pm = detect_package_manager(sudo=host.sudo, dry_run=cfg.dry_run)
        if pm is None:
            raise InstallError("Unknown package manager. Skipping CUDA installation.")

        decisions["os"] = {"id": os_release.id, "version_id": os_release.version_id}
        decisions["package_manager"] = pm.name

        version = cuda_version()
        if version:
            logger.debug("CUDA %s already available; skipping driver packages", version)
            return state

        target = resolve_cuda_target(os_release)
        if target is None:
            raise InstallStopped(
                f"Unsupported distribution {os_release.id!r}. Skipping CUDA installation.", warning=True
            )

        install_cuda_driver(
            pm,
            target,
            repo_base=cfg.cuda_repo_base,
            machine=host.machine,
            keyring=cfg.cuda_keyring,
            workspace=state["workspace"],
        )
        decisions["cuda_repo"] = target.slug
        return state
