from __future__ import annotations

from typing import Sequence


class InstallerError(RuntimeError):
    """Fatal installer condition. The run exits non-zero."""


class UnsupportedEnvironment(InstallerError):
    pass


class InsufficientPrivileges(InstallerError):
    pass


class MissingDependencies(InstallerError):
    def __init__(self, tools: Sequence[str]):
        self.tools = list(tools)
        lines = ["The following tools are required but missing:"]
        lines += [f"  - {t}" for t in self.tools]
        super().__init__("\n".join(lines))


class CommandError(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class DownloadError(InstallerError):
    pass


class InstallError(InstallerError):
    pass


class InstallStopped(Exception):
    """Deliberate early, successful end of the run (no GPU, driver present...)."""

    def __init__(self, reason: str, *, warning: bool = False):
        super().__init__(reason)
        self.reason = reason
        self.warning = warning
