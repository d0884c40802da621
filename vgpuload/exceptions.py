"""Exception hierarchy for vgpuload.

Every error raised on purpose derives from ``VgpuLoadError`` so the CLI can
report it and exit non-zero without a traceback.
"""

from __future__ import annotations


class VgpuLoadError(Exception):
    """Base exception for vgpuload errors."""

    def __init__(self, message: str, slot: str | None = None) -> None:
        self.slot = slot
        super().__init__(message)


class ConfigError(VgpuLoadError):
    """Raised when the configuration cannot be loaded or validated."""

    pass


class PrivilegeError(VgpuLoadError):
    """Raised when provisioning is attempted without root privileges."""

    def __init__(self) -> None:
        super().__init__("This command must be run as root.")


class CommandNotFoundError(VgpuLoadError):
    """Raised when an external executable cannot be located."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Command not found: {command}")


class DeviceDiscoveryError(VgpuLoadError):
    """Raised when PCI device enumeration fails."""

    pass


class SriovAlreadyEnabledError(VgpuLoadError):
    """Raised when SR-IOV is already enabled on a device."""

    def __init__(self, address: str, slot: str, numvfs: int) -> None:
        self.address = address
        self.numvfs = numvfs
        super().__init__(
            f"SR-IOV is already enabled on device {address} ({numvfs} VFs). "
            "SR-IOV must be disabled on all devices before running; "
            "please disable it and try again.",
            slot=slot,
        )


class SriovEnableError(VgpuLoadError):
    """Raised when the SR-IOV enable command fails."""

    def __init__(self, address: str, slot: str, returncode: int, output: str) -> None:
        self.address = address
        self.returncode = returncode
        self.output = output
        message = f"Failed to enable SR-IOV on {address} (exit code {returncode})"
        if output:
            message = f"{message}: {output}"
        super().__init__(message, slot=slot)


class ProfileError(VgpuLoadError):
    """Raised when the mdev profile cannot be resolved for a device."""

    def __init__(self, slot: str, profile: str, reason: str) -> None:
        self.profile = profile
        self.reason = reason
        super().__init__(
            f"Profile '{profile}' is not usable on device {slot}: {reason}",
            slot=slot,
        )


class IdentityStoreError(VgpuLoadError):
    """Raised when a device's UUID store cannot be read or written."""

    pass


class IdentityStoreMismatchError(IdentityStoreError):
    """Raised when a stored UUID count differs from the profile capacity."""

    def __init__(self, slot: str, stored: int, expected: int) -> None:
        self.stored = stored
        self.expected = expected
        super().__init__(
            f"UUID store for device {slot} holds {stored} UUIDs but the "
            f"profile allows {expected} instances",
            slot=slot,
        )


class BindError(VgpuLoadError):
    """Raised when writing a UUID to a VF create node fails."""

    def __init__(self, slot: str, path: str, uuid: str, reason: str) -> None:
        self.path = path
        self.uuid = uuid
        super().__init__(
            f"Failed to create vGPU {uuid} on device {slot} via {path}: {reason}",
            slot=slot,
        )
