"""
Version command - displays vgpuload version information
"""

from vgpuload.version.vgpuload_version import VGPULOAD_VERSION


def run_version(verbose: bool = False) -> None:
    """
    Display vgpuload version information.

    Args:
        verbose: If True, show additional details like full hash and date
    """
    if verbose:
        print(f"vgpuload version {VGPULOAD_VERSION.full_version()}")
        print("\nDetailed version information:")
        print(f"  Semantic Version: {VGPULOAD_VERSION}")
        print(f"  Release Date:     {VGPULOAD_VERSION.date_string()}")
        print(f"  Package Hash:     {VGPULOAD_VERSION.hash}")
    else:
        print(f"vgpuload {VGPULOAD_VERSION}")
