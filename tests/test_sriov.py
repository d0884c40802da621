"""Tests for the SR-IOV guard and enablement."""

import pytest

from vgpuload.backends.sriov import SriovManager
from vgpuload.backends.sysfs import SysfsDevice
from vgpuload.exceptions import (
    SriovAlreadyEnabledError,
    SriovEnableError,
    VgpuLoadError,
)

SRIOV_MANAGE = "/usr/lib/nvidia/sriov-manage"


def test_guard_passes_when_disabled(fake_host):
    fake_host.add_device("65:00.0")
    device = SysfsDevice(fake_host.root, "0000:65:00.0")
    manager = SriovManager(fake_host.runner, SRIOV_MANAGE)

    assert manager.is_enabled(device) is False
    manager.guard(device, "65:00.0")


def test_guard_trips_when_enabled(fake_host):
    fake_host.add_device("65:00.0", sriov_numvfs=8)
    device = SysfsDevice(fake_host.root, "0000:65:00.0")
    manager = SriovManager(fake_host.runner, SRIOV_MANAGE)

    assert manager.is_enabled(device) is True
    with pytest.raises(SriovAlreadyEnabledError) as excinfo:
        manager.guard(device, "65:00.0")

    assert "0000:65:00.0" in str(excinfo.value)
    assert "disable" in str(excinfo.value)
    assert excinfo.value.slot == "65:00.0"
    assert excinfo.value.numvfs == 8


def test_guard_unreadable_state(fake_host):
    path = fake_host.add_device("65:00.0")
    (path / "sriov_numvfs").write_text("???\n")
    device = SysfsDevice(fake_host.root, "0000:65:00.0")

    with pytest.raises(VgpuLoadError, match="Cannot read SR-IOV state"):
        SriovManager(fake_host.runner, SRIOV_MANAGE).guard(device, "65:00.0")


def test_enable_runs_sriov_manage(fake_host):
    fake_host.add_device("65:00.0", num_vfs=4)
    device = SysfsDevice(fake_host.root, "0000:65:00.0")

    SriovManager(fake_host.runner, SRIOV_MANAGE).enable(device, "65:00.0")

    assert fake_host.runner.calls == [[SRIOV_MANAGE, "-e", "0000:65:00.0"]]
    assert device.sriov_numvfs() == 4


def test_enable_failure_is_raised(fake_host):
    fake_host.add_device("65:00.0")
    fake_host.runner.enable_returncode = 2
    device = SysfsDevice(fake_host.root, "0000:65:00.0")

    with pytest.raises(SriovEnableError) as excinfo:
        SriovManager(fake_host.runner, SRIOV_MANAGE).enable(device, "65:00.0")

    assert excinfo.value.returncode == 2
    assert "sriov-manage: error" in str(excinfo.value)
