"""Plain-text storage for per-device vGPU UUID assignments."""

from __future__ import annotations

import fcntl
import os
import tempfile
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from vgpuload.exceptions import IdentityStoreError, IdentityStoreMismatchError
from vgpuload.models.config_models import MismatchPolicy
from vgpuload.utils.logger import Logger

STORE_PREFIX = ".uuid-file-"


@dataclass
class IdentityAssignment:
    """UUIDs for one device plus how they were obtained."""

    uuids: list[str]
    created: bool = False
    extended: int = 0


class IdentityStore:
    """Persist the ordered vGPU UUID list of each device.

    One file per device, one UUID per line, named after the short PCI slot.
    The file is written once and then only ever read (or appended to under
    the ``extend`` policy), so VM definitions that reference a UUID stay
    valid across reboots.

    Storage layout::

        <store_dir>/
        ├── .uuid-file-65:00.0
        └── .uuid-file-65:00.0.lock

    Parameters
    ----------
    store_dir : Path
        Directory holding the UUID files.  Relative paths resolve against the
        working directory, so pin it for boot-time runs.
    """

    def __init__(self, store_dir: Path | str = ".") -> None:
        self._base_dir = Path(store_dir)

    def path_for(self, slot: str) -> Path:
        """Return the UUID file path for a device."""
        return self._base_dir / f"{STORE_PREFIX}{slot}"

    @contextmanager
    def lock(self, slot: str) -> Iterator[None]:
        """Hold an exclusive per-device lock for the duration of the block.

        Raises
        ------
        IdentityStoreError
            If the store directory or lock file cannot be created.
        """
        lock_path = self.path_for(slot).with_name(f"{STORE_PREFIX}{slot}.lock")
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            f = open(lock_path, "a")
        except OSError as e:
            raise IdentityStoreError(f"Cannot use {lock_path}: {e}", slot=slot) from e

        with f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    def read(self, slot: str) -> list[str] | None:
        """Read a device's stored UUIDs.

        Parameters
        ----------
        slot : str
            Short PCI slot of the device.

        Returns
        -------
        list[str] | None
            UUIDs in file order, or None if no file exists.

        Raises
        ------
        IdentityStoreError
            If the file is unreadable or holds something that isn't a UUID.
        """
        path = self.path_for(slot)
        if not path.exists():
            return None

        try:
            lines = path.read_text().splitlines()
        except OSError as e:
            raise IdentityStoreError(f"Cannot read {path}: {e}", slot=slot) from e

        uuids = []
        for lineno, line in enumerate(lines, start=1):
            value = line.strip()
            if not value:
                continue
            try:
                uuid.UUID(value)
            except ValueError as e:
                raise IdentityStoreError(
                    f"{path}:{lineno} is not a UUID: {value!r}", slot=slot
                ) from e
            uuids.append(value)
        return uuids

    def _write(self, slot: str, uuids: list[str]) -> None:
        """Atomically replace a device's UUID file."""
        path = self.path_for(slot)
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._base_dir, prefix=f"{path.name}."
            )
        except OSError as e:
            raise IdentityStoreError(f"Cannot use {path}: {e}", slot=slot) from e

        try:
            with os.fdopen(fd, "w") as f:
                f.writelines(f"{value}\n" for value in uuids)
            os.replace(tmp_name, path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise IdentityStoreError(f"Cannot write {path}: {e}", slot=slot) from e

    def load_or_create(
        self,
        slot: str,
        count: int,
        policy: MismatchPolicy = MismatchPolicy.EXTEND,
    ) -> IdentityAssignment:
        """Return the device's UUIDs, generating them on first use.

        Parameters
        ----------
        slot : str
            Short PCI slot of the device.
        count : int
            Instance capacity of the profile (max_instance).
        policy : MismatchPolicy
            ``extend`` appends fresh UUIDs to a store shorter than ``count``
            and keeps a longer store whole; ``strict`` refuses any mismatch.

        Returns
        -------
        IdentityAssignment
            The UUIDs in store order.

        Raises
        ------
        IdentityStoreMismatchError
            Under ``strict`` when the stored count differs from ``count``.
        IdentityStoreError
            If the store cannot be read or written.
        """
        log = Logger.get("identity")
        path = self.path_for(slot)

        with self.lock(slot):
            existing = self.read(slot)

            if existing is None:
                log.info(
                    f"UUID file for device {slot} does not exist. "
                    f"Generating {count} new UUIDs..."
                )
                uuids = [str(uuid.uuid4()) for _ in range(count)]
                self._write(slot, uuids)
                log.info(f"{count} new UUIDs generated and saved to {path}")
                return IdentityAssignment(uuids=uuids, created=True)

            log.info(f"UUID file {path} for device {slot} already exists.")

            if len(existing) == count:
                log.info("Reassign UUID to Virtual Functions")
                return IdentityAssignment(uuids=existing)

            if policy == MismatchPolicy.STRICT:
                raise IdentityStoreMismatchError(slot, len(existing), count)

            if len(existing) > count:
                log.warning(
                    f"UUID file {path} holds {len(existing)} UUIDs but the "
                    f"profile allows {count}; the last "
                    f"{len(existing) - count} stay unassigned"
                )
                return IdentityAssignment(uuids=existing)

            missing = count - len(existing)
            uuids = existing + [str(uuid.uuid4()) for _ in range(missing)]
            self._write(slot, uuids)
            log.warning(
                f"UUID file {path} held {len(existing)} UUIDs, profile allows "
                f"{count}; appended {missing} new UUIDs"
            )
            return IdentityAssignment(uuids=uuids, extended=missing)
