"""Provision command - enable SR-IOV and create persistent vGPU instances.

CLI Examples:
    vgpuload provision                            # Use defaults (nvidia-562)
    vgpuload provision --profile nvidia-560       # Pick another mdev type
    vgpuload provision --store-dir /var/lib/vgpuload
    vgpuload provision --export-file report.json  # Write a JSON report
"""

import json

from vgpuload.backends.process import CommandRunner
from vgpuload.exceptions import VgpuLoadError
from vgpuload.models.config_models import LoaderConfig
from vgpuload.models.provision_models import ProvisionReport
from vgpuload.provisioner import Provisioner


def _print_summary(report: ProvisionReport) -> None:
    print(f"\nvGPU provisioning summary (profile {report.profile}):")
    if not report.devices:
        print("  No devices provisioned")
        return

    for device in report.devices:
        if device.status == "failed":
            print(f"  {device.address}: FAILED - {device.error}")
            continue

        origin = "generated" if device.created else "reused"
        line = (
            f"  {device.address}: {len(device.bindings)}/{device.max_instance} "
            f"vGPUs created, UUIDs {origin}"
        )
        if device.extended:
            line += f" (+{device.extended} appended)"
        if device.unbound:
            line += f", {device.unbound} without a VF"
        print(line)


def run_provision(
    config: LoaderConfig,
    export_filename: str | None = None,
    runner: CommandRunner | None = None,
) -> ProvisionReport:
    """Provision all devices and print a summary.

    Args:
        config: Run configuration.
        export_filename: If set, write the report as JSON to this path.
        runner: Command runner override (tests).

    Raises:
        VgpuLoadError: If the report file cannot be written.

    Returns:
        The run report; callers derive the exit status from it.
    """
    report = Provisioner(config, runner=runner).run()
    _print_summary(report)

    if export_filename:
        try:
            with open(export_filename, "w") as f:
                json.dump(report.to_dict(), f, indent=2)
        except OSError as e:
            raise VgpuLoadError(
                f"Cannot write report to {export_filename}: {e}"
            ) from e
        print(f"\nReport written to {export_filename}")

    return report
