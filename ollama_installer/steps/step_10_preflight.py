from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config_from_state
from ..errors import MissingDependencies
from ..lib.preflight import check_platform, detect_host, missing_tools

logger = logging.getLogger(__name__)


class PreflightStep:
    step_id = "10_preflight"
    # Every later step reads state["host"].
    always_run = True

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_from_state(state)

        check_platform()
        host = detect_host()

        # Nothing on the host may change before this check passes.
        missing = missing_tools(cfg.required_tools)
        if missing:
            raise MissingDependencies(missing)

        state["host"] = host
        decisions = state.setdefault("execution", {}).setdefault("decisions", {})
        decisions["arch"] = host.arch
        decisions["elevated_with"] = " ".join(host.sudo) or None
        return state
