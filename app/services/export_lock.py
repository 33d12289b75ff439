from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from app.core.errors import StorageWriteFailed

logger = logging.getLogger(__name__)


class ExportLock:
    """
    Mutual exclusion for the shared export file.

    A re-entrant thread lock serializes the worker threads of this process and a
    file lock next to the export file serializes separate worker processes.
    Waiting longer than ``timeout`` seconds raises ``StorageWriteFailed``.
    """

    def __init__(self, lock_path: str | Path, timeout: float = 30.0):
        self.lock_path = Path(lock_path)
        self.timeout = timeout
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(self.lock_path), timeout=timeout)

    @contextmanager
    def hold(self) -> Iterator[None]:
        if not self._thread_lock.acquire(timeout=self.timeout):
            logger.error("Timed out after %ss waiting for export lock", self.timeout)
            raise StorageWriteFailed(f"export resource busy: lock not acquired within {self.timeout}s")
        try:
            try:
                self.lock_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_lock.acquire()
            except Timeout as e:
                logger.error("Timed out acquiring file lock %s", self.lock_path)
                raise StorageWriteFailed(f"export resource busy: {self.lock_path} is locked") from e
            except OSError as e:
                raise StorageWriteFailed(f"export lock unavailable: {e}") from e
            try:
                yield
            finally:
                self._file_lock.release()
        finally:
            self._thread_lock.release()
