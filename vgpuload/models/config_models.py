"""Pydantic model for the loader configuration."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROFILE = "nvidia-562"
DEFAULT_SYSFS_ROOT = Path("/sys/bus/pci/devices")
DEFAULT_SRIOV_MANAGE = Path("/usr/lib/nvidia/sriov-manage")


class MismatchPolicy(str, Enum):
    """What to do when a stored UUID list differs in length from max_instance."""

    EXTEND = "extend"
    STRICT = "strict"


class LoaderConfig(BaseModel):
    """Settings for one provisioning run.

    Built once at startup and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    profile: str = Field(
        DEFAULT_PROFILE,
        description="mdev type to instantiate on every VF (e.g., 'nvidia-562')",
    )
    sysfs_root: Path = Field(
        DEFAULT_SYSFS_ROOT, description="Directory holding PCI device nodes"
    )
    store_dir: Path = Field(
        Path("."), description="Directory holding the per-device UUID files"
    )
    sriov_manage: Path = Field(
        DEFAULT_SRIOV_MANAGE, description="Path to NVIDIA's sriov-manage tool"
    )
    lspci: str = Field("lspci", description="lspci executable name or path")
    vendor: str = Field(
        "NVIDIA", description="Vendor string matched against lspci output"
    )
    pci_domain: str = Field(
        "0000", description="PCI domain prefixed to lspci short-form slots"
    )
    mismatch_policy: MismatchPolicy = Field(
        MismatchPolicy.EXTEND,
        description="Policy when a stored UUID count differs from max_instance",
    )

    @field_validator("profile", "vendor", "lspci")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("pci_domain")
    @classmethod
    def _domain_is_hex(cls, value: str) -> str:
        value = value.strip().lower()
        if len(value) != 4 or any(c not in "0123456789abcdef" for c in value):
            raise ValueError("must be four hex digits")
        return value
