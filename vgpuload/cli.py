#!/usr/bin/env python3
"""vgpuload CLI - persistent NVIDIA vGPU provisioning."""

import sys

import click

from vgpuload.config import load_config
from vgpuload.exceptions import VgpuLoadError
from vgpuload.models.config_models import MismatchPolicy
from vgpuload.utils.env import get_env
from vgpuload.utils.logger import Logger


def config_options(func):
    """Options shared by commands that need a LoaderConfig."""
    options = [
        click.option(
            "--config",
            "config_file",
            type=click.Path(exists=True, dir_okay=False),
            help="Configuration file (YAML or JSON)",
        ),
        click.option("--profile", "-p", help="mdev type to create (e.g. nvidia-562)"),
        click.option(
            "--store-dir",
            type=click.Path(file_okay=False),
            help="Directory holding the per-device UUID files",
        ),
        click.option(
            "--sysfs-root",
            type=click.Path(file_okay=False),
            help="PCI devices sysfs directory (default /sys/bus/pci/devices)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(config_file, **overrides):
    try:
        return load_config(config_file, overrides)
    except VgpuLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
def vgpuload():
    """Configure persistent NVIDIA SR-IOV vGPUs on a KVM host."""
    if Logger.is_configured():
        return
    try:
        Logger.configure(
            level=get_env("VGPULOAD_LOG_LEVEL", default="INFO"),
            timestamps=get_env("VGPULOAD_LOG_TIMESTAMPS", default=True, as_type=bool),
        )
    except ValueError as e:
        click.echo(f"Error: invalid VGPULOAD_LOG_LEVEL: {e}", err=True)
        sys.exit(1)


@vgpuload.command()
@config_options
@click.option(
    "--mismatch-policy",
    type=click.Choice([policy.value for policy in MismatchPolicy]),
    help="When a UUID file's length differs from max_instance: extend or fail",
)
@click.option(
    "--export-file",
    default=None,
    help="Write the provisioning report to a JSON file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def provision(
    config_file, profile, store_dir, sysfs_root, mismatch_policy, export_file, verbose
):
    """Enable SR-IOV and create vGPUs with persistent UUIDs (requires root)."""
    from vgpuload.commands.provision_cmd import run_provision

    if verbose:
        Logger.set_level("DEBUG")

    config = _build_config(
        config_file,
        profile=profile,
        store_dir=store_dir,
        sysfs_root=sysfs_root,
        mismatch_policy=mismatch_policy,
    )

    try:
        report = run_provision(config, export_filename=export_file)
    except VgpuLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not report.succeeded:
        sys.exit(1)


@vgpuload.command()
@config_options
def status(config_file, profile, store_dir, sysfs_root):
    """Show SR-IOV state, VFs and stored UUIDs of each device."""
    from vgpuload.commands.status_cmd import run_status

    config = _build_config(
        config_file, profile=profile, store_dir=store_dir, sysfs_root=sysfs_root
    )

    try:
        run_status(config)
    except VgpuLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@vgpuload.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed version information")
def version(verbose):
    """Display vgpuload version information."""
    from vgpuload.commands.version_cmd import run_version

    run_version(verbose=verbose)


def main():
    """Entry point for the vgpuload CLI."""
    vgpuload()


if __name__ == "__main__":
    main()
