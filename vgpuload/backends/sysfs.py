"""Access to the kernel's PCI SR-IOV and mdev sysfs nodes.

Layout under ``/sys/bus/pci/devices/<address>/``::

    sriov_numvfs
    virtfn0 -> ../0000:65:00.4
    virtfn0/mdev_supported_types/<profile>/description
    virtfn0/mdev_supported_types/<profile>/create
"""

import re
from pathlib import Path

VF_PREFIX = "virtfn"
MDEV_TYPES_DIR = "mdev_supported_types"

_DIGITS = re.compile(r"(\d+)")
_DESCRIPTION_SPLIT = re.compile(r"[,=]")


def natural_key(name: str) -> list[int | str]:
    """Sort key comparing digit runs numerically ('virtfn9' < 'virtfn10')."""
    return [int(part) if part.isdigit() else part for part in _DIGITS.split(name)]


def parse_max_instance(description: str) -> int | None:
    """Extract the ``max_instance`` value from an mdev type description.

    The description is a comma separated list of ``key=value`` pairs, e.g.
    ``num_heads=4, frl_config=60, framebuffer=2048M, max_instance=24``.

    Returns:
        The integer value, or None if the key is absent or not an integer.
    """
    fields = [field.strip() for field in _DESCRIPTION_SPLIT.split(description)]
    for i, field in enumerate(fields[:-1]):
        if field == "max_instance":
            try:
                return int(fields[i + 1])
            except ValueError:
                return None
    return None


class SysfsDevice:
    """A physical PCI function as seen through sysfs."""

    def __init__(self, root: Path, address: str) -> None:
        self.root = Path(root)
        self.address = address
        self.path = self.root / address

    def sriov_numvfs(self) -> int:
        """Number of VFs currently enabled; 0 when the node is absent or empty.

        Raises:
            ValueError: If the node holds something other than an integer.
        """
        node = self.path / "sriov_numvfs"
        try:
            raw = node.read_text().strip()
        except FileNotFoundError:
            return 0
        if not raw:
            return 0
        return int(raw)

    def virtual_functions(self) -> list[str]:
        """VF entry names, numerically ordered by their index suffix."""
        if not self.path.is_dir():
            return []
        names = [
            entry.name
            for entry in self.path.iterdir()
            if entry.name.startswith(VF_PREFIX)
            and entry.name[len(VF_PREFIX) :].isdigit()
        ]
        return sorted(names, key=natural_key)

    def profile_dir(self, vf: str, profile: str) -> Path:
        """Directory of an mdev type under a VF."""
        return self.path / vf / MDEV_TYPES_DIR / profile

    def supported_profiles(self, vf: str = "virtfn0") -> list[str]:
        """mdev type names offered by a VF."""
        types_dir = self.path / vf / MDEV_TYPES_DIR
        if not types_dir.is_dir():
            return []
        return sorted((entry.name for entry in types_dir.iterdir()), key=natural_key)

    def profile_description(self, profile: str, vf: str = "virtfn0") -> str:
        """Read the description text of an mdev type.

        Raises:
            FileNotFoundError: If the VF or profile does not exist.
        """
        return (self.profile_dir(vf, profile) / "description").read_text()

    def create_node(self, vf: str, profile: str) -> Path:
        """Path of the node that instantiates a vGPU when a UUID is written."""
        return self.profile_dir(vf, profile) / "create"

    def write_create(self, vf: str, profile: str, uuid: str) -> Path:
        """Write a UUID into a VF's create node.

        Raises:
            OSError: If the kernel rejects the write.
        """
        node = self.create_node(vf, profile)
        with open(node, "w") as f:
            f.write(f"{uuid}\n")
        return node
