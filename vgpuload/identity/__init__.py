"""Persistent vGPU UUID assignments."""

from vgpuload.identity.store import IdentityAssignment, IdentityStore

__all__ = ["IdentityAssignment", "IdentityStore"]
