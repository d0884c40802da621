"""SR-IOV state checks and enablement via NVIDIA's sriov-manage."""

from pathlib import Path

from vgpuload.backends.process import CommandRunner, SubprocessRunner
from vgpuload.backends.sysfs import SysfsDevice
from vgpuload.exceptions import (
    SriovAlreadyEnabledError,
    SriovEnableError,
    VgpuLoadError,
)
from vgpuload.utils.logger import Logger


class SriovManager:
    """Guard and enable SR-IOV on physical NVIDIA functions."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        sriov_manage: str | Path = "/usr/lib/nvidia/sriov-manage",
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.sriov_manage = str(sriov_manage)

    def is_enabled(self, device: SysfsDevice) -> bool:
        """SR-IOV counts as enabled when sriov_numvfs is greater than zero."""
        return device.sriov_numvfs() > 0

    def guard(self, device: SysfsDevice, slot: str) -> None:
        """Refuse to touch a device that already has VFs enabled.

        Raises:
            SriovAlreadyEnabledError: If sriov_numvfs > 0.
        """
        try:
            numvfs = device.sriov_numvfs()
        except (OSError, ValueError) as e:
            raise VgpuLoadError(
                f"Cannot read SR-IOV state of {device.address}: {e}", slot=slot
            ) from e
        if numvfs > 0:
            raise SriovAlreadyEnabledError(device.address, slot, numvfs)

    def enable(self, device: SysfsDevice, slot: str) -> None:
        """Switch a device into SR-IOV mode.

        Raises:
            CommandNotFoundError: If sriov-manage is missing.
            SriovEnableError: If sriov-manage exits non-zero.
        """
        log = Logger.get("sriov")
        log.info(f"Enabling SR-IOV on {device.address}")
        result = self.runner.run([self.sriov_manage, "-e", device.address])
        if not result.ok:
            raise SriovEnableError(
                device.address, slot, result.returncode, result.output
            )
        if result.stdout.strip():
            log.debug(result.stdout.strip())
