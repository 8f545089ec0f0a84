"""Inter-process lock guarding the data file's read-modify-write cycle."""

from __future__ import annotations

import contextlib
from collections.abc import Generator
from pathlib import Path

from filelock import FileLock, Timeout

DEFAULT_LOCK_TIMEOUT = 10.0


class LockTimeout(Exception):
    """Raised when the store lock cannot be acquired within the timeout."""


def lock_path_for(data_path: Path) -> Path:
    """Return the sidecar lock file used for *data_path* (``<name>.lock``)."""
    return data_path.with_name(data_path.name + ".lock")


@contextlib.contextmanager
def store_lock(
    data_path: Path,
    timeout: float = DEFAULT_LOCK_TIMEOUT,
) -> Generator[None, None, None]:
    """Hold an exclusive lock on *data_path* for the duration of the block.

    Any thread or process that goes through this lock is serialized against
    every other one using the same data file.

    Raises:
        LockTimeout: If the lock is not acquired within *timeout* seconds.
    """
    lock = FileLock(lock_path_for(data_path), timeout=timeout)
    try:
        lock.acquire()
    except Timeout:
        raise LockTimeout(
            f"Could not lock '{data_path.name}' within {timeout}s"
        ) from None
    try:
        yield
    finally:
        lock.release()
