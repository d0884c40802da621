"""Tests for the vgpuload version information."""

from datetime import datetime

from vgpuload.version.vgpuload_version import Version


def test_version_methods():
    """Test Version class methods."""
    v = Version(
        major=1,
        minor=2,
        patch=3,
        hash="abcdef123456",
        date=datetime(2023, 1, 1),
    )

    assert str(v) == "1.2.3"
    assert v.semver() == (1, 2, 3)
    assert v.hash_short(4) == "abcd"
    assert v.date_string("%Y") == "2023"
    assert "1.2.3" in v.full_version()
    assert "abcd" in v.full_version()


def test_vgpuload_version_instance():
    """Test the global VGPULOAD_VERSION instance."""
    import vgpuload
    from vgpuload.version.vgpuload_version import VGPULOAD_VERSION

    assert isinstance(VGPULOAD_VERSION, Version)
    assert vgpuload.__version__ == str(VGPULOAD_VERSION)
    assert len(VGPULOAD_VERSION.hash) == 64
