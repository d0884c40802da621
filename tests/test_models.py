"""Tests for report and configuration models."""

import pytest
from pydantic import ValidationError

from vgpuload.models import DeviceReport, LoaderConfig, ProvisionReport


def _device(status):
    return DeviceReport(
        slot="65:00.0", address="0000:65:00.0", profile="nvidia-562", status=status
    )


def test_partial_devices_still_succeed():
    report = ProvisionReport(profile="nvidia-562", devices=[_device("ok"), _device("partial")])
    assert report.succeeded is True


def test_failed_device_fails_the_run():
    report = ProvisionReport(profile="nvidia-562", devices=[_device("ok"), _device("failed")])
    assert report.succeeded is False
    assert report.to_dict()["succeeded"] is False


def test_empty_run_succeeds():
    assert ProvisionReport(profile="nvidia-562").succeeded is True


def test_unknown_status_rejected():
    with pytest.raises(ValidationError):
        _device("skipped")


def test_pci_domain_validation():
    assert LoaderConfig(pci_domain="000A").pci_domain == "000a"
    with pytest.raises(ValidationError):
        LoaderConfig(pci_domain="0")
