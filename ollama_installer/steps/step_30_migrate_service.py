from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..lib.command import available
from ..lib.env import host_from_state
from ..lib.migrate import legacy_install_present, migrate_legacy_service

logger = logging.getLogger(__name__)


class MigrateServiceStep:
    """Ollama used to run as a system service under its own "ollama" account."""

    step_id = "30_migrate_service"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        if not available("systemctl"):
            logger.debug("systemctl not available; nothing to migrate")
            return state

        cfg = config_from_state(state)
        host = host_from_state(state)

        if not legacy_install_present(cfg.service_name, cfg.legacy_user):
            return state

        logger.info(
            "Detected a previous install of Ollama. Ollama will now run as your current user. Migrating models..."
        )
        result = migrate_legacy_service(
            host,
            service=cfg.service_name,
            unit_path=cfg.legacy_unit_path,
            legacy_models_dir=cfg.legacy_models_dir,
            dry_run=cfg.dry_run,
        )

        state.setdefault("execution", {}).setdefault("decisions", {})["migration"] = {
            "created": result.created,
            "moved": result.moved,
            "skipped": result.skipped,
        }
        return state
