"""files.py - Log file naming, rotation and retention for one directory.

Log files are named ``log_<YYYY-MM-DD>-<NNN>.csv``, where NNN counts the
files started on that calendar day. LogFileManager decides which file a new
logger appends to and which old files are deleted; both decisions are made
once, when a logger is constructed, while the directory's mutex is held.

Typical usage::

    manager = LogFileManager("/var/log/app", max_file_size=10_000_000, max_days=7)
    manager.ensure_directory()
    with mutex:
        path = manager.resolve_active_file(time.time())
        handle = manager.open(path)
        manager.delete_expired(time.time(), keep=path)
"""

import logging
import os
import re
import time
from datetime import datetime
from typing import List, Optional

from .errors import LogPermissionError

logger = logging.getLogger(__name__)

LOG_FILE_PATTERN = re.compile(
    r"log_(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})(-[0-9]+)?\.csv"
)

SECONDS_PER_DAY = 24 * 60 * 60


def log_file_name(day: str, number: int) -> str:
    """Return the file name for the ``number``-th file of ``day``.

    Example:
        >>> log_file_name("2024-01-15", 2)
        'log_2024-01-15-002.csv'
    """
    return f"log_{day}-{number:03d}.csv"


class LogFileManager:
    """Owns the log files of one directory.

    Attributes:
        _directory (str): Directory holding the log files, without a
            trailing separator.
        _max_file_size (int): A file larger than this many bytes is not
            reused; the next counter is tried instead.
        _max_days (int): Files dated more than this many days before the
            reference time are deleted by ``delete_expired()``.
        _permission (int): Mode for created directories and log files.
    """

    def __init__(
        self,
        directory: str,
        max_file_size: int = 100_000_000,
        max_days: int = 7,
        permission: int = 0o777,
    ) -> None:
        self._directory = directory
        self._max_file_size = max_file_size
        self._max_days = max_days
        self._permission = permission

    @property
    def directory(self) -> str:
        return self._directory

    def ensure_directory(self) -> None:
        """Create the log directory and any missing parents.

        Raises:
            OSError: If the directory cannot be created.
        """
        if not os.path.isdir(self._directory):
            os.makedirs(self._directory, mode=self._permission, exist_ok=True)
            logger.debug("Created log directory %s", self._directory)

    def resolve_active_file(self, now: Optional[float] = None) -> str:
        """Return the path new rows should be appended to.

        Starts at counter 000 for the calendar day of ``now`` and moves to
        the next counter while the candidate exists and is larger than the
        size cap.

        Args:
            now: Epoch seconds used to pick the day. Defaults to the
                current time.

        Raises:
            LogPermissionError: If the chosen file exists but is not
                writable.
        """
        if now is None:
            now = time.time()
        day = datetime.fromtimestamp(now).strftime("%Y-%m-%d")

        number = 0
        path = os.path.join(self._directory, log_file_name(day, number))
        while os.path.exists(path) and os.path.getsize(path) > self._max_file_size:
            number += 1
            path = os.path.join(self._directory, log_file_name(day, number))

        if number:
            logger.info("Rotated to %s", path)
        if os.path.exists(path) and not os.access(path, os.W_OK):
            raise LogPermissionError(
                f"Cannot write to log file. Please check permissions on {path}"
            )
        return path

    def open(self, path: str):
        """Open ``path`` for appending CSV rows.

        Raises:
            OSError: If the file cannot be opened.
        """
        return open(
            path,
            "a",
            encoding="utf-8",
            newline="",
            opener=self._opener,
        )

    def delete_expired(
        self, now: Optional[float] = None, keep: Optional[str] = None
    ) -> List[str]:
        """Delete log files dated more than ``max_days`` before ``now``.

        The date embedded in each matching file name is read as local
        midnight. A file is deleted only if that moment is strictly older
        than the cutoff; names that do not match, or that hold an impossible
        date, are left alone. ``keep`` names a file that is never deleted,
        normally the active log file; with ``max_days=0`` today's file
        would otherwise be expired.

        Returns:
            Paths of the deleted files.
        """
        if now is None:
            now = time.time()
        cutoff = now - self._max_days * SECONDS_PER_DAY
        kept = os.path.abspath(keep) if keep is not None else None

        deleted = []
        with os.scandir(self._directory) as entries:
            for entry in entries:
                match = LOG_FILE_PATTERN.fullmatch(entry.name)
                if match is None or not entry.is_file():
                    continue
                if os.path.abspath(entry.path) == kept:
                    continue
                try:
                    file_time = datetime.strptime(
                        match.group("date"), "%Y-%m-%d"
                    ).timestamp()
                except ValueError:
                    continue
                if file_time < cutoff:
                    os.unlink(entry.path)
                    deleted.append(entry.path)
                    logger.info("Deleted expired log file %s", entry.path)
        return deleted

    def _opener(self, path: str, flags: int) -> int:
        return os.open(path, flags, self._permission)
