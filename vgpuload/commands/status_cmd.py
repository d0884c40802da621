"""Status command - read-only view of SR-IOV state and stored UUIDs."""

from vgpuload.backends.pci import PCIBackend
from vgpuload.backends.process import CommandRunner
from vgpuload.backends.sysfs import SysfsDevice
from vgpuload.exceptions import IdentityStoreError
from vgpuload.identity.store import IdentityStore
from vgpuload.models.config_models import LoaderConfig


def run_status(config: LoaderConfig, runner: CommandRunner | None = None) -> None:
    """Print every matching device with its VFs and stored UUID assignment."""
    pci = PCIBackend(runner, config.lspci, config.pci_domain)
    store = IdentityStore(config.store_dir)
    devices = pci.vendor_devices(config.vendor)

    print(f"{config.vendor} devices:")
    if not devices:
        print("  No devices detected")
        return

    for dev in devices:
        sysfs = SysfsDevice(config.sysfs_root, dev.address)
        print(f"\n  [{dev.address}] {dev.description}")
        try:
            numvfs = sysfs.sriov_numvfs()
        except (OSError, ValueError) as e:
            print(f"      SR-IOV:         unreadable ({e})")
        else:
            state = "enabled" if numvfs > 0 else "disabled"
            print(f"      SR-IOV:         {state} ({numvfs} VFs)")
        print(f"      Virtual Funcs:  {len(sysfs.virtual_functions())}")

        try:
            uuids = store.read(dev.slot)
        except IdentityStoreError as e:
            print(f"      UUID file:      unreadable ({e})")
            continue
        if uuids is None:
            print(f"      UUID file:      none ({store.path_for(dev.slot)})")
            continue
        print(f"      UUID file:      {store.path_for(dev.slot)} ({len(uuids)} UUIDs)")
        for index, value in enumerate(uuids):
            print(f"        {index:>3}  {value}")
