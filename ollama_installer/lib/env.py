from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class HostContext:
    """Facts about the invoking user and machine, resolved once in preflight."""

    user: str
    group: str
    uid: int
    home: str
    search_path: str
    machine: str
    arch: str
    sudo: Tuple[str, ...] = ()

    @property
    def privileged(self) -> bool:
        return not self.sudo

    @property
    def paths(self) -> "Paths":
        return Paths(home=self.home)


@dataclass(frozen=True)
class Paths:
    home: str

    @property
    def data_dir(self) -> Path:
        return Path(self.home) / ".ollama"

    @property
    def models_dir(self) -> Path:
        return self.data_dir / "models"

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    @property
    def server_log(self) -> Path:
        return self.logs_dir / "server.log"

    @property
    def private_key(self) -> Path:
        return self.data_dir / "id_ed25519"

    @property
    def user_unit_dir(self) -> Path:
        return Path(self.home) / ".config" / "systemd" / "user"


def host_from_state(state: dict) -> HostContext:
    host = state.get("host")
    if not isinstance(host, HostContext):
        raise RuntimeError("state.host missing (preflight did not run)")
    return host
