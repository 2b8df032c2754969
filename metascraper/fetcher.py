from __future__ import annotations

import logging
import time as _time
from typing import Any, Optional, Union

import requests

from .backoff import LinearBackoff
from .durations import parse_duration
from .errors import FetchExhausted, InvalidConfig
from .models import FetchResult

logger = logging.getLogger(__name__)

# Codes up to and including 299 count as success, 1xx included.
MAX_SUCCESS_STATUS = 299

_CHUNK_SIZE = 64 * 1024


class _DeadlineReader:
    """Body stream that refuses to keep reading once the attempt deadline has passed.

    requests applies its timeout to the connect and to each socket read, so a
    server trickling bytes could otherwise hold an attempt open indefinitely."""

    def __init__(self, raw: Any, deadline: float) -> None:
        self._raw = raw
        self._deadline = deadline

    def read(self, size: int = -1) -> bytes:
        if size is not None and size >= 0:
            self._check()
            return self._raw.read(size)
        chunks = []
        while True:
            self._check()
            chunk = self._raw.read(_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def _check(self) -> None:
        if _time.monotonic() > self._deadline:
            raise TimeoutError("response body not read within the request timeout")

    def close(self) -> None:
        self._raw.close()


class Fetcher:
    """Performs one HTTP GET per URL with retries and a per-attempt timeout.

    The timeout bounds the whole attempt, body included: reading the returned
    body past the deadline raises TimeoutError.
    """

    def __init__(
        self,
        timeout: Union[str, float],
        max_retries: int,
        backoff: Optional[LinearBackoff] = None,
    ) -> None:
        if isinstance(timeout, str):
            seconds = parse_duration(timeout)
        else:
            seconds = float(timeout)
        if seconds <= 0:
            raise InvalidConfig(f"timeout must be positive, got {timeout!r}")
        if max_retries < 0:
            raise InvalidConfig(f"max_retries must be >= 0, got {max_retries}")

        self._timeout = seconds
        self._max_retries = int(max_retries)
        self._backoff = backoff or LinearBackoff()

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def fetch(self, url: str) -> FetchResult:
        """Fetch url, returning the open body on success.

        Raises FetchExhausted once max_retries attempts have failed.
        The caller must close the returned FetchResult.
        """
        for attempt in range(self._max_retries):
            logger.info("fetching url", extra={"fields": {"url": url, "attempt": attempt + 1}})
            response = None
            deadline = _time.monotonic() + self._timeout
            try:
                response = requests.get(url, timeout=self._timeout, stream=True)
            except requests.RequestException as exc:
                logger.error("failed to fetch url", extra={"fields": {"url": url, "err": repr(exc)}})
            else:
                if response.status_code <= MAX_SUCCESS_STATUS:
                    response.raw.decode_content = True
                    return FetchResult(
                        body=_DeadlineReader(response.raw, deadline),
                        status_code=response.status_code,
                        response=response,
                    )
                logger.error(
                    "failed to fetch url",
                    extra={"fields": {"url": url, "status_code": response.status_code}},
                )
                self._discard(url, response)

            if attempt + 1 < self._max_retries:
                _time.sleep(self._backoff.get_sleep(attempt))

        raise FetchExhausted(url, self._max_retries)

    @staticmethod
    def _discard(url: str, response: requests.Response) -> None:
        try:
            response.close()
        except Exception as exc:  # noqa: BLE001
            logger.error("failed to close response body", extra={"fields": {"url": url, "err": repr(exc)}})
