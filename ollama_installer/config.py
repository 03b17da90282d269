from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_URL = "https://ollama.ai/download/ollama-linux-{arch}"
DEFAULT_BIN_DIRS = ["/usr/local/bin", "/usr/bin", "/bin"]
DEFAULT_REQUIRED_TOOLS = ["install", "mkdir", "mv", "rm", "chown", "tee"]
DEFAULT_CUDA_REPO_BASE = "https://developer.download.nvidia.com/compute/cuda/repos"


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def download_url(self) -> str:
        return str(self.raw.get("download_url") or DEFAULT_DOWNLOAD_URL)

    @property
    def bin_dirs(self) -> List[str]:
        return list(self.raw.get("bin_dirs") or DEFAULT_BIN_DIRS)

    @property
    def required_tools(self) -> List[str]:
        return list(self.raw.get("required_tools") or DEFAULT_REQUIRED_TOOLS)

    @property
    def service_name(self) -> str:
        return str((self.raw.get("service") or {}).get("name") or "ollama")

    @property
    def legacy_user(self) -> str:
        return str((self.raw.get("legacy") or {}).get("user") or "ollama")

    @property
    def legacy_models_dir(self) -> str:
        return str((self.raw.get("legacy") or {}).get("models_dir") or "/usr/share/ollama/.ollama/models")

    @property
    def legacy_unit_path(self) -> str:
        return str(
            (self.raw.get("legacy") or {}).get("unit_path") or f"/etc/systemd/system/{self.service_name}.service"
        )

    @property
    def cuda_repo_base(self) -> str:
        return str((self.raw.get("cuda") or {}).get("repo_base") or DEFAULT_CUDA_REPO_BASE).rstrip("/")

    @property
    def cuda_keyring(self) -> str:
        return str((self.raw.get("cuda") or {}).get("keyring") or "cuda-keyring_1.1-1_all.deb")

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"yaml", "yml"}:
        return "yaml"
    # Default to JSON for unknown extensions.
    return "json"


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML/JSON config mapping. A missing path means "all defaults"."""

    if not path:
        return {}

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    text = p.read_text(encoding="utf-8")
    if _detect_format(p) == "yaml":
        import yaml

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    else:
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping/object, got {type(data).__name__}")

    logger.debug("Loaded config from %s", p)
    return data


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with defaults (without overriding user values)."""

    state.setdefault("config", {})
    state.setdefault("host", None)
    state.setdefault("execution", {})

    exe = state["execution"]
    exe.setdefault("current_step", None)
    exe.setdefault("completed_steps", [])
    exe.setdefault("decisions", {})
    exe.setdefault("stopped", None)

    return state


def config_from_state(state: Dict[str, Any]) -> InstallerConfig:
    return InstallerConfig(raw=dict(state.get("config") or {}))
