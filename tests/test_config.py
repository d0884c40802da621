"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from vgpuload.config import load_config
from vgpuload.exceptions import ConfigError
from vgpuload.models.config_models import LoaderConfig, MismatchPolicy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "VGPULOAD_PROFILE",
        "VGPULOAD_STORE_DIR",
        "VGPULOAD_SYSFS_ROOT",
        "VGPULOAD_SRIOV_MANAGE",
        "VGPULOAD_MISMATCH_POLICY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()
    assert config.profile == "nvidia-562"
    assert config.sysfs_root == Path("/sys/bus/pci/devices")
    assert config.store_dir == Path(".")
    assert config.sriov_manage == Path("/usr/lib/nvidia/sriov-manage")
    assert config.mismatch_policy == MismatchPolicy.EXTEND


def test_yaml_file(tmp_path):
    path = tmp_path / "vgpuload.yaml"
    path.write_text(
        "profile: nvidia-560\n"
        "store_dir: /var/lib/vgpuload\n"
        "mismatch_policy: strict\n"
    )

    config = load_config(path)
    assert config.profile == "nvidia-560"
    assert config.store_dir == Path("/var/lib/vgpuload")
    assert config.mismatch_policy == MismatchPolicy.STRICT


def test_json_file(tmp_path):
    path = tmp_path / "vgpuload.json"
    path.write_text(json.dumps({"profile": "nvidia-563"}))
    assert load_config(path).profile == "nvidia-563"


def test_empty_yaml_file(tmp_path):
    path = tmp_path / "vgpuload.yml"
    path.write_text("")
    assert load_config(path).profile == "nvidia-562"


def test_precedence(tmp_path, monkeypatch):
    path = tmp_path / "vgpuload.yaml"
    path.write_text("profile: from-file\nstore_dir: /from/file\n")
    monkeypatch.setenv("VGPULOAD_PROFILE", "from-env")
    monkeypatch.setenv("VGPULOAD_STORE_DIR", "/from/env")

    config = load_config(path, {"profile": "from-cli", "store_dir": None})
    assert config.profile == "from-cli"
    assert config.store_dir == Path("/from/env")


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_non_mapping_file(tmp_path):
    path = tmp_path / "vgpuload.yaml"
    path.write_text("- nvidia-562\n")
    with pytest.raises(ConfigError, match="must be a dictionary"):
        load_config(path)


def test_malformed_file(tmp_path):
    path = tmp_path / "vgpuload.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(path)


def test_invalid_values():
    with pytest.raises(ConfigError):
        load_config(overrides={"profile": "   "})
    with pytest.raises(ConfigError):
        load_config(overrides={"mismatch_policy": "truncate"})
    with pytest.raises(ConfigError):
        load_config(overrides={"unknown_key": 1})


def test_config_is_frozen():
    config = LoaderConfig()
    with pytest.raises(ValueError):
        config.profile = "nvidia-560"
