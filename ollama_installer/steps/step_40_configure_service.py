from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..config import config_from_state
from ..lib import systemd
from ..lib.binary import choose_bindir
from ..lib.command import available
from ..lib.env import host_from_state

logger = logging.getLogger(__name__)


class ConfigureServiceStep:
    step_id = "40_configure_service"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        if not available("systemctl"):
            logger.info("systemctl not available; skipping background service setup")
            return state

        cfg = config_from_state(state)
        host = host_from_state(state)
        paths = host.paths
        decisions = state.setdefault("execution", {}).setdefault("decisions", {})

        binary = decisions.get("binary") or str(Path(choose_bindir(cfg.bin_dirs, host.search_path)) / "ollama")

        logger.info("Creating ollama systemd service...")
        if not cfg.dry_run:
            paths.logs_dir.mkdir(parents=True, exist_ok=True)

        unit = systemd.render_user_unit(
            binary=binary,
            home=host.home,
            log_path=str(paths.server_log),
            search_path=host.search_path,
        )
        unit_path = systemd.write_user_unit(paths.user_unit_dir, cfg.service_name, unit, dry_run=cfg.dry_run)
        decisions["unit_path"] = str(unit_path)

        manager_state = systemd.user_manager_state()
        if manager_state in systemd.ACTIVE_MANAGER_STATES:
            logger.info("Enabling and starting ollama service...")
            systemd.activate_user_unit(cfg.service_name, dry_run=cfg.dry_run)
            decisions["service_started"] = True
        else:
            logger.debug("User service manager is %r; unit written but not started", manager_state or "unavailable")
            decisions["service_started"] = False
        return state
