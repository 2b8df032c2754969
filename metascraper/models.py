from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Any, BinaryIO, List, Optional

from .errors import StreamCloseError


@dataclass
class FetchResult:
    """A successful response: the open body stream and its status code.

    The body belongs to whoever received the result and must be released
    with close() once it has been read."""

    body: BinaryIO
    status_code: int
    response: Optional[Any] = field(default=None, repr=False)

    def close(self) -> None:
        """Release the body (and the underlying connection, if any)."""
        try:
            if self.response is not None:
                self.response.close()
            else:
                self.body.close()
        except Exception as exc:  # noqa: BLE001
            raise StreamCloseError(f"failed to close response body: {exc}") from exc

    def __enter__(self) -> "FetchResult":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


@dataclass(frozen=True)
class PageMetadata:
    title: str = ""
    description: str = ""


@dataclass(frozen=True)
class ResultRecord:
    date: _dt.date
    url: str
    status_code: str
    title: str
    description: str

    def as_row(self) -> List[str]:
        """Return the record as a CSV row: date, url, status_code, title, description."""
        return [self.date.isoformat(), self.url, self.status_code, self.title, self.description]
