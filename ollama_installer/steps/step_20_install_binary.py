from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.binary import choose_bindir, install_binary
from ..lib.download import download_file
from ..lib.env import host_from_state

logger = logging.getLogger(__name__)


class InstallBinaryStep:
    step_id = "20_install_binary"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)
        host = host_from_state(state)
        workspace = state["workspace"]
        dry_run = cfg.dry_run

        bindir = choose_bindir(cfg.bin_dirs, host.search_path)
        url = cfg.download_url.format(arch=host.arch)
        artifact = workspace.file("ollama")

        logger.info("Downloading ollama...")
        if dry_run:
            logger.info("Would download %s", url)
        else:
            download_file(url, artifact)

        logger.info("Installing ollama to %s...", bindir)
        binary = install_binary(artifact, bindir, sudo=host.sudo, dry_run=dry_run)

        decisions = state.setdefault("execution", {}).setdefault("decisions", {})
        decisions["bindir"] = bindir
        decisions["binary"] = binary
        return state
