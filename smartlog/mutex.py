"""mutex.py - Advisory lock shared by every process logging to one directory.

InterProcessMutex serializes all mutation of a log directory: choosing the
active file, deleting expired files and appending flushed rows. It is backed
by ``fcntl.flock`` on a dedicated lock file, so the lock is held per open
file and released by the kernel if the holding process dies.

The lock file's contents are a human-readable marker ("Locked"/"Unlocked")
that only helps when inspecting a stuck directory by hand.
"""

import fcntl
import logging
import os
import threading

from .errors import LockError

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".lockfile"


class InterProcessMutex:
    """Exclusive lock on ``<directory>/.lockfile``.

    ``acquire()`` blocks without a timeout until the lock is available.
    A per-instance ``threading.Lock`` is taken first so that threads sharing
    one mutex object exclude each other as well; ``flock`` alone would let
    two holders of the same open file through.

    Example:
        >>> mutex = InterProcessMutex("/var/log/app")
        >>> with mutex:
        ...     pass  # mutate the directory
    """

    def __init__(self, directory: str, permission: int = 0o777) -> None:
        self._path = os.path.join(directory, LOCK_FILE_NAME)
        self._permission = permission
        self._file = None
        self._owned = False
        self._thread_lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    @property
    def owned(self) -> bool:
        """True while this instance holds the lock."""
        return self._owned

    def acquire(self) -> None:
        """Block until the exclusive lock is held.

        Raises:
            LockError: If the lock file cannot be opened for writing or the
                lock cannot be taken.
        """
        self._thread_lock.acquire()
        try:
            handle = self._open()
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            self._owned = True
            self._mark("Locked")
        except OSError as exc:
            self._abandon()
            raise LockError(f"Could not lock {self._path}: {exc}") from exc
        except BaseException:
            self._abandon()
            raise

    def release(self) -> None:
        """Release the lock.

        Calling this without holding the lock is a caller bug; it is reported
        as a warning and otherwise ignored.
        """
        if not self._owned:
            logger.warning(
                "release() called on %s but the lock is not held", self._path
            )
            return
        try:
            self._mark("Unlocked")
            fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
        except OSError as exc:
            self._abandon()
            raise LockError(f"Could not unlock {self._path}: {exc}") from exc
        self._owned = False
        self._thread_lock.release()

    def close(self) -> None:
        """Release the lock if held and close the lock file."""
        if self._owned:
            self.release()
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "InterProcessMutex":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _open(self):
        if self._file is None:
            self._file = open(
                self._path,
                "a+",
                encoding="utf-8",
                opener=self._opener,
            )
        return self._file

    def _opener(self, path: str, flags: int) -> int:
        return os.open(path, flags, self._permission)

    def _mark(self, status: str) -> None:
        self._file.seek(0)
        self._file.truncate()
        self._file.write(status + "\n")
        self._file.flush()

    def _abandon(self) -> None:
        if self._owned:
            self._owned = False
            try:
                fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
            except OSError as exc:
                logger.warning("Could not unlock %s: %s", self._path, exc)
        self._thread_lock.release()
