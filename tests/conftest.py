from __future__ import annotations

import shutil
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from ollama_installer.errors import CommandError
from ollama_installer.lib.command import CmdResult
from ollama_installer.lib.env import HostContext

# Every module that imports run_cmd by name.
RUN_CMD_MODULES = [
    "ollama_installer.lib.binary",
    "ollama_installer.lib.cuda",
    "ollama_installer.lib.gpu",
    "ollama_installer.lib.kmod",
    "ollama_installer.lib.merge",
    "ollama_installer.lib.migrate",
    "ollama_installer.lib.pkg",
    "ollama_installer.lib.systemd",
]

Handler = Callable[[List[str]], Optional[Tuple[int, str]]]


class FakeRunner:
    """Records commands instead of running them.

    Responses are matched on the longest registered argv prefix; a handler
    may simulate side effects and return (returncode, stdout).
    """

    def __init__(self):
        self.calls: List[List[str]] = []
        self.envs: List[Optional[dict]] = []
        self.inputs: List[Optional[str]] = []
        self._rules: Dict[Tuple[str, ...], Handler] = {}

    def respond(self, *prefix: str, stdout: str = "", returncode: int = 0) -> None:
        self._rules[tuple(prefix)] = lambda argv: (returncode, stdout)

    def on(self, *prefix: str, handler: Handler) -> None:
        self._rules[tuple(prefix)] = handler

    def _match(self, argv: List[str]) -> Tuple[int, str]:
        best: Optional[Tuple[str, ...]] = None
        for prefix in self._rules:
            if tuple(argv[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return 0, ""
        return self._rules[best](argv) or (0, "")

    def __call__(self, argv: Sequence[str], *, check=True, env=None, cwd=None, input_text=None, dry_run=False):
        argv = list(argv)
        self.calls.append(argv)
        self.envs.append(env)
        self.inputs.append(input_text)
        if dry_run:
            return CmdResult(argv=argv, returncode=0, stdout="", stderr="")
        rc, out = self._match(argv)
        if check and rc != 0:
            raise CommandError(argv, rc, "")
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr="")

    def ran(self, *argv: str) -> bool:
        return list(argv) in self.calls

    def index(self, *argv: str) -> int:
        return self.calls.index(list(argv))


@pytest.fixture
def fake_run(monkeypatch) -> FakeRunner:
    runner = FakeRunner()
    for mod in RUN_CMD_MODULES:
        monkeypatch.setattr(f"{mod}.run_cmd", runner)
    return runner


@pytest.fixture
def tools(monkeypatch) -> set:
    """Set of tool names that resolve on PATH."""

    present: set = set()
    monkeypatch.setattr(shutil, "which", lambda name, *a, **kw: f"/usr/bin/{name}" if name in present else None)
    return present


@pytest.fixture
def host(tmp_path) -> HostContext:
    home = tmp_path / "home"
    home.mkdir()
    return HostContext(
        user="alice",
        group="staff",
        uid=1000,
        home=str(home),
        search_path="/usr/local/bin:/usr/bin:/bin",
        machine="x86_64",
        arch="amd64",
        sudo=("sudo",),
    )


@pytest.fixture
def root_host(host) -> HostContext:
    return HostContext(
        user="root",
        group="root",
        uid=0,
        home=host.home,
        search_path=host.search_path,
        machine=host.machine,
        arch=host.arch,
        sudo=(),
    )
