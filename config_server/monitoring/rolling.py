"""
Rolling File Logger - Monitoring Layer

Append-only, date-keyed log files with bounded retention.

Files are named `{base_name}_{YYYY-MM-DD}.log`. The fixed-width date makes
lexicographic order match chronological order, so retention only needs a
name sort. Day rollover is detected lazily on the first append of a new day.

All appends go through one lock: the rollover check, the retention pass and
the write itself are serialized, so lines never interleave and rotation
never races a write.
"""

import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Union

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as YYYY-MM-DD_HH-MM-SS.ff (hundredths of a second)."""
    return f"{moment.strftime(TIMESTAMP_FORMAT)}.{moment.microsecond // 10000:02d}"


class RollingFileLogger:
    """
    Thread-safe writer for daily log files.

    Args:
        log_directory: Existing, writable directory for log files
        base_name: File name prefix
        retention_count: Number of most recent files to keep
        clock: Callable returning the current local time
    """

    def __init__(
        self,
        log_directory: Union[str, Path],
        base_name: str = "server",
        retention_count: int = 10,
        clock: Callable[[], datetime] = datetime.now
    ):
        if retention_count < 1:
            raise ValueError(f"retention_count must be at least 1, got {retention_count}")

        self.log_directory = Path(log_directory)
        self.base_name = base_name
        self.retention_count = retention_count
        self._clock = clock
        self._lock = threading.Lock()

        self._current_file = self._file_for(self._clock())
        self.cleanup_old_files()

    @property
    def current_file(self) -> Path:
        """Path the next append will target (as of the last append)."""
        return self._current_file

    def _file_for(self, moment: datetime) -> Path:
        return self.log_directory / f"{self.base_name}_{moment:%Y-%m-%d}.log"

    def list_log_files(self) -> List[Path]:
        """Return this logger's files, newest first."""
        return sorted(
            (p for p in self.log_directory.glob(f"{self.base_name}_*.log") if p.is_file()),
            key=lambda p: p.name,
            reverse=True
        )

    def cleanup_old_files(self) -> None:
        """
        Delete all but the newest `retention_count` log files.

        The active file counts toward the limit even before its first line
        is written, so a fresh rotation leaves exactly `retention_count`
        files once the entry lands.
        """
        files = self.list_log_files()
        if self._current_file not in files:
            files = sorted(files + [self._current_file], key=lambda p: p.name, reverse=True)

        for stale in files[self.retention_count:]:
            if stale == self._current_file:
                continue
            try:
                stale.unlink()
            except OSError:
                # Locked or already gone: skip and try again on the next rotation.
                continue

    def append(self, message: str) -> None:
        """
        Append one timestamped entry to the current day's file.

        The entry is flushed to disk before the lock is released. Write
        errors propagate to the caller.

        Args:
            message: Entry text (may span several lines)
        """
        with self._lock:
            now = self._clock()
            target = self._file_for(now)

            if target != self._current_file:
                self._current_file = target
                self.cleanup_old_files()

            entry = f"[{format_timestamp(now)}] {message}\n"
            with open(target, "a", encoding="utf-8") as f:
                f.write(entry)
                f.flush()
                os.fsync(f.fileno())
