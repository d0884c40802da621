"""PCI backend - identifies devices on the PCIe bus using lspci."""

from vgpuload.backends.process import CommandRunner, SubprocessRunner
from vgpuload.exceptions import DeviceDiscoveryError


class PCIDevice:
    """Represents a device on the PCIe bus."""

    def __init__(self, slot: str, description: str, domain: str = "0000"):
        self.slot = slot
        self.description = description
        self.domain = domain

    @property
    def address(self) -> str:
        """Full domain-qualified address, as used under /sys/bus/pci/devices."""
        return f"{self.domain}:{self.slot}"

    def __repr__(self) -> str:
        """Return a string representation of the PCI device."""
        return f"PCIDevice(slot='{self.slot}', description='{self.description}')"


class PCIBackend:
    """Backend for PCIe device discovery using lspci.

    Only the leading slot token of each lspci line is used; vendor matching is
    a plain substring test on the rest of the line.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        lspci: str = "lspci",
        domain: str = "0000",
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.lspci = lspci
        self.domain = domain

    def list_devices(self) -> list[PCIDevice]:
        """List all PCI devices reported by lspci, in bus-scan order.

        Raises:
            CommandNotFoundError: If lspci is not installed.
            DeviceDiscoveryError: If lspci exits non-zero.
        """
        result = self.runner.run([self.lspci])
        if not result.ok:
            raise DeviceDiscoveryError(
                f"{self.lspci} failed with exit code {result.returncode}: "
                f"{result.output}"
            )
        return self._parse_lspci_output(result.stdout)

    def vendor_devices(self, vendor: str = "NVIDIA") -> list[PCIDevice]:
        """Return distinct devices whose lspci line mentions the vendor.

        An empty list means nothing to provision, not an error.
        """
        seen: set[str] = set()
        devices = []
        for dev in self.list_devices():
            if vendor not in dev.description or dev.slot in seen:
                continue
            seen.add(dev.slot)
            devices.append(dev)
        return devices

    def vendor_slots(self, vendor: str = "NVIDIA") -> list[str]:
        """Short-form slots (bus:device.function) of the vendor's devices."""
        return [dev.slot for dev in self.vendor_devices(vendor)]

    def _parse_lspci_output(self, output: str) -> list[PCIDevice]:
        """Parse plain lspci output.

        Example line format:
        65:00.0 3D controller: NVIDIA Corporation GA102GL [A40] (rev a1)
        """
        devices = []
        for line in output.splitlines():
            if not line.strip():
                continue

            parts = line.strip().split(None, 1)
            slot = parts[0]
            description = parts[1] if len(parts) > 1 else ""

            # lspci -D output already carries the domain
            if slot.count(":") == 2:
                domain, slot = slot.split(":", 1)
            else:
                domain = self.domain

            devices.append(PCIDevice(slot=slot, description=description, domain=domain))

        return devices
