"""vGPU provisioning: SR-IOV enablement, UUID assignment and mdev creation.

For each NVIDIA device reported by lspci, in bus order:

1. refuse to continue if SR-IOV is already enabled
2. enable SR-IOV with sriov-manage
3. read max_instance from the profile description of VF 0
4. load (or generate) the device's persistent UUID list
5. write UUID *i* into the create node of the *i*-th VF
"""

import os

from vgpuload.backends.pci import PCIBackend
from vgpuload.backends.process import CommandRunner, SubprocessRunner
from vgpuload.backends.sriov import SriovManager
from vgpuload.backends.sysfs import SysfsDevice, parse_max_instance
from vgpuload.exceptions import (
    BindError,
    PrivilegeError,
    ProfileError,
    SriovAlreadyEnabledError,
    VgpuLoadError,
)
from vgpuload.identity.store import IdentityStore
from vgpuload.models.config_models import LoaderConfig
from vgpuload.models.provision_models import (
    BindingRecord,
    DeviceReport,
    ProvisionReport,
)
from vgpuload.utils.logger import Logger


def check_privileges() -> None:
    """Raise PrivilegeError unless running as root."""
    if os.geteuid() != 0:
        raise PrivilegeError()


class Provisioner:
    """Create persistent vGPU instances on every NVIDIA device of the host.

    Parameters
    ----------
    config : LoaderConfig
        Run settings; read-only for the lifetime of the provisioner.
    runner : CommandRunner | None
        Executes lspci and sriov-manage.  Defaults to SubprocessRunner.
    """

    def __init__(
        self,
        config: LoaderConfig,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessRunner()
        self.pci = PCIBackend(self.runner, config.lspci, config.pci_domain)
        self.sriov = SriovManager(self.runner, config.sriov_manage)
        self.store = IdentityStore(config.store_dir)
        self.log = Logger.get("provisioner")

    def device(self, address: str) -> SysfsDevice:
        """Sysfs view of a physical function."""
        return SysfsDevice(self.config.sysfs_root, address)

    def resolve_max_instance(self, device: SysfsDevice, slot: str) -> int:
        """Read the profile's instance capacity from VF 0.

        Raises:
            ProfileError: If the profile is missing on this device or its
                description lacks a positive integer max_instance.
        """
        profile = self.config.profile
        try:
            description = device.profile_description(profile)
        except FileNotFoundError as e:
            available = device.supported_profiles()
            reason = "profile not found under virtfn0"
            if available:
                reason = f"{reason} (available: {', '.join(available)})"
            raise ProfileError(slot, profile, reason) from e
        except OSError as e:
            raise ProfileError(slot, profile, f"cannot read description: {e}") from e

        max_instance = parse_max_instance(description)
        if max_instance is None:
            raise ProfileError(
                slot, profile, f"no max_instance in description {description.strip()!r}"
            )
        if max_instance <= 0:
            raise ProfileError(slot, profile, f"max_instance is {max_instance}")
        return max_instance

    def bind(
        self,
        device: SysfsDevice,
        slot: str,
        uuids: list[str],
        count: int,
    ) -> tuple[list[BindingRecord], int]:
        """Write UUIDs into the create nodes of the device's VFs.

        VF *i* (numeric order) receives UUID *i*, for *i* in ``0..count-1``.
        ``uuids`` holds at least ``count`` entries; any tail is left unbound.

        Returns:
            The successful bindings and the number of instances left unbound
            because the device has fewer VFs than ``count``.

        Raises:
            BindError: If any create-node write fails.
        """
        profile = self.config.profile
        vfs = device.virtual_functions()
        bindings: list[BindingRecord] = []

        for index in range(count):
            if index >= len(vfs):
                unbound = count - index
                self.log.warning(
                    f"Not enough VFs for all instances on {slot}: "
                    f"{unbound} of {count} UUIDs not used."
                )
                return bindings, unbound

            vf = vfs[index]
            value = uuids[index]
            node = device.create_node(vf, profile)
            self.log.info(f"{value} > {node}")
            try:
                device.write_create(vf, profile, value)
            except OSError as e:
                raise BindError(slot, str(node), value, str(e)) from e

            bindings.append(
                BindingRecord(index=index, vf=vf, uuid=value, path=str(node))
            )

        return bindings, 0

    def provision_device(self, slot: str, address: str | None = None) -> DeviceReport:
        """Run the full sequence for one physical device.

        Raises:
            SriovAlreadyEnabledError: If the device already has VFs.
            VgpuLoadError: For any other device-level failure.
        """
        address = address or f"{self.config.pci_domain}:{slot}"
        device = self.device(address)
        report = DeviceReport(slot=slot, address=address, profile=self.config.profile)

        self.sriov.guard(device, slot)
        self.sriov.enable(device, slot)

        max_instance = self.resolve_max_instance(device, slot)
        report.max_instance = max_instance
        self.log.info(f"Profile={self.config.profile} max_instance={max_instance}")

        assignment = self.store.load_or_create(
            slot, max_instance, self.config.mismatch_policy
        )
        report.uuids = assignment.uuids
        report.created = assignment.created
        report.extended = assignment.extended

        bindings, unbound = self.bind(device, slot, assignment.uuids, max_instance)
        report.bindings = bindings
        report.unbound = unbound
        report.status = "partial" if unbound else "ok"
        return report

    def run(self) -> ProvisionReport:
        """Provision every matching device in enumeration order.

        Device-level failures are recorded in the report and the run moves on
        to the next device.

        Raises:
            PrivilegeError: If not running as root (before any device work).
            SriovAlreadyEnabledError: Aborts the whole run.
            CommandNotFoundError, DeviceDiscoveryError: If enumeration fails.
        """
        check_privileges()

        report = ProvisionReport(profile=self.config.profile)
        devices = self.pci.vendor_devices(self.config.vendor)
        if not devices:
            self.log.info(f"No {self.config.vendor} devices found; nothing to do.")
            return report

        for dev in devices:
            try:
                device_report = self.provision_device(dev.slot, dev.address)
            except SriovAlreadyEnabledError:
                raise
            except VgpuLoadError as e:
                self.log.error(str(e))
                device_report = DeviceReport(
                    slot=dev.slot,
                    address=dev.address,
                    profile=self.config.profile,
                    status="failed",
                    error=str(e),
                )
            report.devices.append(device_report)

        return report
