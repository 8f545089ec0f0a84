"""Single-file JSON store for the project/task root."""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import Generator
from pathlib import Path

from taskboard.core.errors import StoreBusyError
from taskboard.core.models import Root, is_valid_root, seed_root
from taskboard.storage.fs import atomic_write, dump_json, read_json
from taskboard.storage.locks import DEFAULT_LOCK_TIMEOUT, LockTimeout, store_lock

logger = logging.getLogger(__name__)


class Store:
    """Loads and saves the whole data graph to one JSON file.

    Every call to :meth:`load` reads the file afresh; there is no in-memory
    cache shared between requests.  Mutations should go through
    :meth:`transaction` so that the load and the save happen under one lock.
    """

    def __init__(self, path: Path, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        self.path = Path(path)
        self.lock_timeout = lock_timeout

    def __repr__(self) -> str:
        return f"Store({str(self.path)!r})"

    def load(self) -> Root:
        """Return the persisted root, or a seeded default if none is usable."""
        return self._load()[0]

    def _load(self) -> tuple[Root, bool]:
        """Return ``(root, seeded)``; *seeded* is true when the file was not used."""
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            logger.debug("No data file at %s; using seed data", self.path)
            return seed_root(), True
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Unreadable data file %s (%s); using seed data", self.path, exc)
            return seed_root(), True

        if not is_valid_root(data):
            logger.warning("Data file %s has an unexpected structure; using seed data", self.path)
            return seed_root(), True
        return data, False

    def _load_persisted(self) -> Root:
        """Load the root, writing seed data to disk the first time it is produced.

        The caller must hold the store lock.  A corrupt file is renamed to
        ``<name>.corrupt`` rather than overwritten.
        """
        root, seeded = self._load()
        if seeded:
            if self.path.exists():
                backup = self.path.with_name(self.path.name + ".corrupt")
                self.path.replace(backup)
                logger.warning("Moved unusable data file to %s", backup)
            self.save(root)
        return root

    def save(self, root: Root) -> None:
        """Overwrite the data file with *root* atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(self.path, dump_json(root))
        logger.debug("Saved %d project(s) to %s", len(root["projects"]), self.path)

    @contextlib.contextmanager
    def _locked(self) -> Generator[None, None, None]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with store_lock(self.path, timeout=self.lock_timeout):
                yield
        except LockTimeout as exc:
            raise StoreBusyError(str(exc)) from None

    def read(self) -> Root:
        """Load the root under the store lock.

        Nothing is written unless seed data had to be produced.
        """
        with self._locked():
            return self._load_persisted()

    @contextlib.contextmanager
    def transaction(self) -> Generator[Root, None, None]:
        """Yield the loaded root and save it when the block exits normally.

        If the block raises, its changes are not written and the exception
        propagates.  Seed data produced by the load is persisted either way.

        Raises:
            StoreBusyError: If the store lock cannot be acquired in time.
        """
        with self._locked():
            root = self._load_persisted()
            yield root
            self.save(root)
