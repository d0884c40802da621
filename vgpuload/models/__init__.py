"""Pydantic models for vgpuload configuration and reports."""

from vgpuload.models.config_models import LoaderConfig, MismatchPolicy
from vgpuload.models.provision_models import (
    BindingRecord,
    DeviceReport,
    ProvisionReport,
)

__all__ = [
    "BindingRecord",
    "DeviceReport",
    "LoaderConfig",
    "MismatchPolicy",
    "ProvisionReport",
]
