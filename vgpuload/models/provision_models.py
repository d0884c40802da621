"""Pydantic models describing the outcome of a provisioning run."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class BindingRecord(BaseModel):
    """A UUID written to a virtual function's create node."""

    index: int = Field(..., ge=0, description="Position in the VF and UUID lists")
    vf: str = Field(..., description="Virtual function entry name (e.g., 'virtfn3')")
    uuid: str = Field(..., description="vGPU UUID written to the create node")
    path: str = Field(..., description="Create node that received the UUID")


class DeviceReport(BaseModel):
    """Provisioning outcome for a single physical device."""

    slot: str = Field(..., description="Short PCI slot (e.g., '65:00.0')")
    address: str = Field(..., description="Full PCI address (e.g., '0000:65:00.0')")
    profile: str = Field(..., description="mdev type used for this device")
    status: Literal["ok", "partial", "failed"] = Field(
        "ok", description="Overall result for the device"
    )
    max_instance: int | None = Field(
        None, description="Instance capacity reported by the profile"
    )
    uuids: list[str] = Field(
        default_factory=list, description="UUID assignment loaded or created"
    )
    created: bool = Field(False, description="True if the UUID store was new")
    extended: int = Field(
        0, ge=0, description="UUIDs appended to an existing, shorter store"
    )
    bindings: list[BindingRecord] = Field(
        default_factory=list, description="Create-node writes that succeeded"
    )
    unbound: int = Field(
        0, ge=0, description="Instances left without a VF (VF shortfall)"
    )
    error: str | None = Field(None, description="Error message when failed")


class ProvisionReport(BaseModel):
    """Outcome of a full provisioning run across all devices."""

    profile: str = Field(..., description="mdev type used for the run")
    devices: list[DeviceReport] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when no device failed (partial VF shortfall still counts)."""
        return all(device.status != "failed" for device in self.devices)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the report for JSON export."""
        data = self.model_dump()
        data["succeeded"] = self.succeeded
        return data
