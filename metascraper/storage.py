from __future__ import annotations

import csv
import logging
import queue
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

from .models import ResultRecord

logger = logging.getLogger(__name__)


class StorageBase(ABC):
    """Abstract base class for all record sinks.

    Subclasses must implement write() and close(); sinks can be used as
    context managers.
    """

    @abstractmethod
    def write(self, record: ResultRecord) -> None:
        """Persist a single result record."""

    @abstractmethod
    def close(self) -> None:
        """Flush pending writes and release resources."""

    def __enter__(self) -> "StorageBase":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class CsvStorage(StorageBase):
    """Writes records as CSV rows using a background writer thread.

    The file is opened (and truncated) on construction so that an unusable
    path fails before any work starts.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._file = open(path, "w", encoding="utf-8", newline="")
        self._queue: queue.Queue[Optional[ResultRecord]] = queue.Queue()
        self._error: Optional[BaseException] = None
        self._closed = False
        self._thread = threading.Thread(target=self._writer, name="csv-writer", daemon=True)
        self._thread.start()

    @property
    def path(self) -> str:
        return self._path

    def write(self, record: ResultRecord) -> None:
        """Enqueue a record for background writing."""
        if self._closed:
            raise ValueError("write to closed storage")
        self._queue.put(record)

    def close(self) -> None:
        """Signal the writer thread to flush and stop; re-raise any write failure."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(None)
        self._thread.join()
        if self._error is not None:
            raise self._error

    def _writer(self) -> None:
        with self._file as f:
            w = csv.writer(f)
            while True:
                item = self._queue.get()
                if item is None:
                    break
                if self._error is not None:
                    continue
                try:
                    w.writerow(item.as_row())
                    f.flush()
                except Exception as exc:  # noqa: BLE001
                    logger.error(
                        "failed to write row",
                        extra={"fields": {"path": self._path, "row": item.as_row(), "err": repr(exc)}},
                    )
                    self._error = exc
