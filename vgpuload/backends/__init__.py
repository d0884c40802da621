"""Host backends: external commands, PCI enumeration, sysfs and SR-IOV."""

from vgpuload.backends.pci import PCIBackend, PCIDevice
from vgpuload.backends.process import CommandResult, CommandRunner, SubprocessRunner
from vgpuload.backends.sriov import SriovManager
from vgpuload.backends.sysfs import SysfsDevice, natural_key, parse_max_instance

__all__ = [
    "CommandResult",
    "CommandRunner",
    "PCIBackend",
    "PCIDevice",
    "SriovManager",
    "SubprocessRunner",
    "SysfsDevice",
    "natural_key",
    "parse_max_instance",
]
