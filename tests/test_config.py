from __future__ import annotations

import json

import pytest

from ollama_installer.config import InstallerConfig, ensure_defaults, load_config


def test_defaults():
    cfg = InstallerConfig()

    assert cfg.download_url.format(arch="arm64") == "https://ollama.ai/download/ollama-linux-arm64"
    assert cfg.bin_dirs == ["/usr/local/bin", "/usr/bin", "/bin"]
    assert cfg.service_name == "ollama"
    assert cfg.legacy_user == "ollama"
    assert cfg.legacy_models_dir == "/usr/share/ollama/.ollama/models"
    assert cfg.legacy_unit_path == "/etc/systemd/system/ollama.service"
    assert cfg.cuda_keyring == "cuda-keyring_1.1-1_all.deb"
    assert cfg.dry_run is False


def test_overrides_from_yaml(tmp_path):
    p = tmp_path / "installer.yaml"
    p.write_text(
        "download_url: https://mirror.example/ollama-{arch}\n"
        "bin_dirs: [/opt/bin]\n"
        "service:\n  name: llm\n"
        "cuda:\n  repo_base: https://mirror.example/cuda/\n"
    )

    cfg = InstallerConfig(raw=load_config(str(p)))

    assert cfg.download_url == "https://mirror.example/ollama-{arch}"
    assert cfg.bin_dirs == ["/opt/bin"]
    assert cfg.legacy_unit_path == "/etc/systemd/system/llm.service"
    assert cfg.cuda_repo_base == "https://mirror.example/cuda"


def test_json_config(tmp_path):
    p = tmp_path / "installer.json"
    p.write_text(json.dumps({"legacy": {"user": "svc-ollama"}}))

    assert InstallerConfig(raw=load_config(str(p))).legacy_user == "svc-ollama"


def test_no_config_path_means_defaults():
    assert load_config(None) == {}


def test_config_must_be_a_mapping(tmp_path):
    p = tmp_path / "installer.yml"
    p.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(str(p))


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_ensure_defaults_keeps_values():
    state = ensure_defaults({"config": {"dry_run": True}})
    assert state["config"] == {"dry_run": True}
    assert state["execution"]["completed_steps"] == []


def test_malformed_yaml_is_a_value_error(tmp_path):
    p = tmp_path / "installer.yaml"
    p.write_text("legacy: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(str(p))


def test_malformed_json_is_a_value_error(tmp_path):
    p = tmp_path / "installer.json"
    p.write_text("{not json")
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_config(str(p))
