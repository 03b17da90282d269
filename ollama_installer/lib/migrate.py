from __future__ import annotations

import logging
from pathlib import Path

from . import systemd
from .command import run_cmd
from .env import HostContext
from .merge import DryRunFsOps, FsOps, LocalFsOps, MergeResult, PrivilegedFsOps, merge_folders

logger = logging.getLogger(__name__)


def legacy_install_present(service: str, legacy_user: str) -> bool:
    """A system-scope unit is running as the dedicated legacy account."""

    if not systemd.is_active(service):
        return False
    return systemd.service_user(service) == legacy_user


def _fs_ops(host: HostContext, dry_run: bool) -> FsOps:
    if dry_run:
        return DryRunFsOps()
    if host.privileged:
        return LocalFsOps()
    return PrivilegedFsOps(sudo=host.sudo)


def migrate_legacy_service(
    host: HostContext,
    *,
    service: str,
    unit_path: str,
    legacy_models_dir: str,
    dry_run: bool = False,
) -> MergeResult:
    """Retire the system-wide service and hand its models to the current user.

    Each step is safe to re-run; a failure aborts the rest (no rollback).
    """

    sudo = host.sudo
    paths = host.paths

    systemd.stop_and_disable(service, sudo=sudo, dry_run=dry_run)
    run_cmd([*sudo, "rm", "-f", unit_path], dry_run=dry_run)

    run_cmd([*sudo, "mkdir", "-p", str(paths.models_dir)], dry_run=dry_run)
    result = merge_folders(legacy_models_dir, paths.models_dir, ops=_fs_ops(host, dry_run))

    run_cmd([*sudo, "chown", "-R", f"{host.user}:{host.group}", str(paths.data_dir)], dry_run=dry_run)
    key = Path(paths.private_key)
    if key.is_file():
        if dry_run:
            logger.info("Would chmod 600 %s", key)
        else:
            key.chmod(0o600)

    systemd.daemon_reload(sudo=sudo, dry_run=dry_run)
    return result
