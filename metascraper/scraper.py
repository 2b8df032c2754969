from __future__ import annotations

import datetime as _dt
import logging
import queue
import threading
from typing import Callable, Iterable, Iterator, Optional

from .controller import AdmissionController
from .errors import FetchExhausted, InvalidConfig, ParseError, StreamCloseError
from .extractor import extract_metadata
from .fetcher import Fetcher
from .models import PageMetadata, ResultRecord

logger = logging.getLogger(__name__)

_DONE = object()


class Scraper:
    """Bounded producer/consumer pipeline turning URLs into ResultRecords.

    A dispatcher thread pulls URLs from the input in order and hands each one
    to a worker, never letting more than max_parallel run at once. Workers
    fetch the page, extract its metadata and put one record on the output
    queue. URLs that fail to fetch or parse produce no record.

    Records come out in completion order, which is not the input order.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        max_parallel: int,
        extract: Callable[..., PageMetadata] = extract_metadata,
        today: Callable[[], _dt.date] = _dt.date.today,
    ) -> None:
        if max_parallel < 1:
            raise InvalidConfig(f"max_parallel must be >= 1, got {max_parallel}")
        self._fetcher = fetcher
        self._max_parallel = int(max_parallel)
        self._extract = extract
        self._today = today

    @property
    def max_parallel(self) -> int:
        return self._max_parallel

    def scrape(self, urls: Iterable[str]) -> Iterator[ResultRecord]:
        """Start scraping urls and return an iterator over the records.

        The iterator ends once the input is exhausted and every dispatched
        URL has finished. An exception raised by the input iterable is
        re-raised here after the in-flight tasks have drained.
        """
        out: "queue.Queue[object]" = queue.Queue()
        controller = AdmissionController(self._max_parallel)

        dispatcher = threading.Thread(
            target=self._dispatch,
            args=(iter(urls), controller, out),
            name="scrape-dispatcher",
            daemon=True,
        )
        dispatcher.start()
        return self._drain_output(out)

    @staticmethod
    def _drain_output(out: "queue.Queue[object]") -> Iterator[ResultRecord]:
        while True:
            item = out.get()
            if item is _DONE:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    def _dispatch(self, urls: Iterator[str], controller: AdmissionController, out: "queue.Queue[object]") -> None:
        error: Optional[BaseException] = None
        try:
            while True:
                controller.wait_for_slot(on_wait=_log_wait)
                try:
                    url = next(urls)
                except StopIteration:
                    break
                logger.info("scraping url", extra={"fields": {"url": url}})
                controller.submit(self._scrape_url, url, out)
        except Exception as exc:  # noqa: BLE001
            logger.error("dispatch failed", extra={"fields": {"err": repr(exc)}})
            error = exc
        finally:
            controller.drain()
            controller.shutdown(wait=True)
            if error is not None:
                out.put(error)
            out.put(_DONE)

    def _scrape_url(self, url: str, out: "queue.Queue[object]") -> None:
        try:
            result = self._fetcher.fetch(url)
        except FetchExhausted as exc:
            logger.error("failed to fetch url", extra={"fields": {"url": url, "err": str(exc)}})
            return
        except Exception as exc:  # noqa: BLE001
            logger.error("unexpected fetch error", extra={"fields": {"url": url, "err": repr(exc)}})
            return

        try:
            meta = self._extract(result.body)
        except ParseError as exc:
            logger.error("failed to parse html", extra={"fields": {"url": url, "err": str(exc)}})
            return
        except Exception as exc:  # noqa: BLE001
            logger.error("unexpected parse error", extra={"fields": {"url": url, "err": repr(exc)}})
            return
        finally:
            try:
                result.close()
            except StreamCloseError as exc:
                logger.error("failed to close response body", extra={"fields": {"url": url, "err": str(exc)}})

        out.put(
            ResultRecord(
                date=self._today(),
                url=url,
                status_code=str(result.status_code),
                title=meta.title,
                description=meta.description,
            )
        )


def _log_wait() -> None:
    logger.info("waiting for request to finish")
