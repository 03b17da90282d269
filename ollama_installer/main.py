from __future__ import annotations

import argparse
import logging
import signal
from typing import Any, Dict, Optional

from .config import ensure_defaults, load_config
from .errors import InstallerError
from .lib.workspace import TempWorkspace
from .logging_utils import configure_logging
from .pipeline import run_pipeline
from .steps import (
    ConfigureServiceStep,
    DetectGpuStep,
    InstallBinaryStep,
    InstallCudaDriverStep,
    LoadKernelModuleStep,
    MigrateServiceStep,
    PreflightStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        PreflightStep(),
        InstallBinaryStep(),
        # Everything from here on is optional.
        MigrateServiceStep(),
        ConfigureServiceStep(),
        DetectGpuStep(),
        InstallCudaDriverStep(),
        LoadKernelModuleStep(),
    ]


def _exit_on_signal(signum, frame):
    raise SystemExit(128 + signum)


def run(
    *,
    config: Optional[Dict[str, Any]] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """Run the installer pipeline. The temp workspace is removed however the run ends."""

    state = ensure_defaults({"config": dict(config or {})})
    if dry_run:
        state["config"]["dry_run"] = True

    workspace = TempWorkspace()
    state["workspace"] = workspace

    previous = signal.signal(signal.SIGTERM, _exit_on_signal)
    try:
        result = run_pipeline(state=state, steps=build_steps(), start_at=start_at, stop_after=stop_after)
        state = result.state
        state["execution"]["ran_steps"] = result.ran_steps
        return state
    except Exception as e:
        state["execution"].setdefault("errors", []).append(
            {"step": state["execution"].get("current_step"), "error": str(e)}
        )
        raise
    finally:
        workspace.cleanup()
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)
        if "binary" in state["execution"]["decisions"]:
            logger.info('Install complete. Run "ollama" from the command line.')


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="ollama-installer", description="Install Ollama on Linux.")
    p.add_argument("--config", default=None, help="Optional installer config (yaml|json)")
    p.add_argument("--log", default=None, help="Also write a detailed log to this file")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 50_detect_gpu)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id (e.g. 40_configure_service)")
    p.add_argument("--dry-run", action="store_true", help="Log commands instead of running them")
    p.add_argument("-v", "--verbose", action="store_true", help="Show every command on the console")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        run(
            config=load_config(args.config),
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=args.dry_run,
        )
    except (InstallerError, ValueError, OSError) as e:
        # OSError: filesystem failures outside run_cmd, e.g. an unreadable legacy tree.
        logger.error("%s", e)
        logger.debug("Installer failed", exc_info=True)
        return 1
    return 0
