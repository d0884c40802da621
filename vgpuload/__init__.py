"""vgpuload - persistent NVIDIA SR-IOV vGPU provisioning for KVM hosts."""

from vgpuload.version.vgpuload_version import VGPULOAD_VERSION, Version

__version__ = str(VGPULOAD_VERSION)
__version_info__ = VGPULOAD_VERSION

__all__ = [
    "VGPULOAD_VERSION",
    "Version",
    "__version__",
    "__version_info__",
]
