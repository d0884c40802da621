"""Shared fixtures: a fake sysfs tree and a scripted command runner."""

from io import StringIO
from pathlib import Path

import pytest

from vgpuload.backends.process import CommandResult, CommandRunner
from vgpuload.models.config_models import LoaderConfig
from vgpuload.utils.logger import Logger

SRIOV_MANAGE = "/usr/lib/nvidia/sriov-manage"

DEFAULT_DESCRIPTION = (
    "num_heads=4, frl_config=60, framebuffer=2048M, "
    "max_resolution=7680x4320, max_instance=16"
)


class FakeRunner(CommandRunner):
    """Answers lspci from canned output and enables VFs in a FakeHost."""

    def __init__(self, host: "FakeHost") -> None:
        self.host = host
        self.calls: list[list[str]] = []
        self.lspci_returncode = 0
        self.enable_returncode = 0

    def run(self, args: list[str]) -> CommandResult:
        self.calls.append(list(args))
        if args[0] == "lspci":
            return CommandResult(
                tuple(args), self.lspci_returncode, self.host.lspci_output(), ""
            )
        if args[0] == SRIOV_MANAGE and args[1] == "-e":
            if self.enable_returncode:
                return CommandResult(
                    tuple(args), self.enable_returncode, "", "sriov-manage: error"
                )
            self.host.enable(args[2])
            return CommandResult(tuple(args), 0, "Enabling VFs on " + args[2], "")
        raise AssertionError(f"unexpected command: {args}")


class FakeHost:
    """A temporary /sys/bus/pci/devices tree with NVIDIA devices."""

    def __init__(self, root: Path, store_dir: Path) -> None:
        self.root = root
        self.store_dir = store_dir
        self.devices: dict[str, dict] = {}
        self.extra_lspci: list[str] = []
        self.runner = FakeRunner(self)
        root.mkdir(parents=True, exist_ok=True)

    def add_device(
        self,
        slot: str,
        num_vfs: int = 16,
        profiles: dict[str, str] | None = None,
        sriov_numvfs: int = 0,
        name: str = "3D controller: NVIDIA Corporation GA102GL [A40] (rev a1)",
    ) -> Path:
        address = f"0000:{slot}"
        path = self.root / address
        path.mkdir()
        (path / "sriov_numvfs").write_text(f"{sriov_numvfs}\n")
        self.devices[address] = {
            "slot": slot,
            "num_vfs": num_vfs,
            "profiles": profiles or {"nvidia-562": DEFAULT_DESCRIPTION},
            "name": name,
        }
        return path

    def enable(self, address: str) -> None:
        """What sriov-manage -e does: create VFs carrying the mdev types."""
        info = self.devices[address]
        path = self.root / address
        for index in range(info["num_vfs"]):
            for profile, description in info["profiles"].items():
                profile_dir = path / f"virtfn{index}" / "mdev_supported_types" / profile
                profile_dir.mkdir(parents=True)
                (profile_dir / "description").write_text(description + "\n")
                (profile_dir / "create").write_text("")
        (path / "sriov_numvfs").write_text(f"{info['num_vfs']}\n")

    def lspci_output(self) -> str:
        lines = [f"{info['slot']} {info['name']}" for info in self.devices.values()]
        return "\n".join(lines + self.extra_lspci) + "\n"

    def created(self, slot: str, vf: str, profile: str = "nvidia-562") -> str:
        node = (
            self.root / f"0000:{slot}" / vf / "mdev_supported_types" / profile / "create"
        )
        return node.read_text().strip()

    def config(self, **kwargs) -> LoaderConfig:
        values = {"sysfs_root": self.root, "store_dir": self.store_dir}
        values.update(kwargs)
        return LoaderConfig(**values)


@pytest.fixture(autouse=True)
def configured_logger():
    """Route vgpuload logging to a buffer for every test."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output, timestamps=False)
    return output


@pytest.fixture
def fake_host(tmp_path):
    return FakeHost(tmp_path / "sys" / "bus" / "pci" / "devices", tmp_path / "state")


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr("os.geteuid", lambda: 0)
