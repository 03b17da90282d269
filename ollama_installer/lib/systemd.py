from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

ACTIVE_MANAGER_STATES = {"running", "degraded"}

_USER_UNIT_TEMPLATE = """\
[Unit]
Description=Ollama

[Service]
ExecStart={exec_start}
Restart=always
RestartSec=3
Environment="HOME={home}"
StandardOutput=file:{log_path}
StandardError=file:{log_path}
Environment="PATH={search_path}"

[Install]
WantedBy=default.target
"""


def render_user_unit(*, binary: str, home: str, log_path: str, search_path: str) -> str:
    return _USER_UNIT_TEMPLATE.format(
        exec_start=f"{binary} serve",
        home=home,
        log_path=log_path,
        search_path=search_path,
    )


# System scope (legacy service)


def is_active(unit: str) -> bool:
    return run_cmd(["systemctl", "is-active", "--quiet", unit], check=False).ok


def service_user(unit: str) -> str:
    r = run_cmd(["systemctl", "show", "-p", "User", "--value", unit], check=False)
    return r.stdout.strip() if r.ok else ""


def stop_and_disable(unit: str, *, sudo: Sequence[str] = (), dry_run: bool = False) -> None:
    run_cmd([*sudo, "systemctl", "stop", unit], dry_run=dry_run)
    run_cmd([*sudo, "systemctl", "disable", unit], dry_run=dry_run)


def daemon_reload(*, sudo: Sequence[str] = (), dry_run: bool = False) -> None:
    run_cmd([*sudo, "systemctl", "daemon-reload"], dry_run=dry_run)


# User scope


def user_manager_state() -> str:
    """Output of `systemctl --user is-system-running` ("" if it cannot run)."""

    r = run_cmd(["systemctl", "--user", "is-system-running"], check=False)
    return r.stdout.strip()


def write_user_unit(unit_dir: Path, name: str, contents: str, *, dry_run: bool = False) -> Path:
    p = Path(unit_dir) / f"{name}.service"
    if dry_run:
        logger.info("Would write %s", p)
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    return p


def activate_user_unit(name: str, *, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "--user", "daemon-reload"], dry_run=dry_run)
    run_cmd(["systemctl", "--user", "enable", name], dry_run=dry_run)
    run_cmd(["systemctl", "--user", "restart", name], dry_run=dry_run)
