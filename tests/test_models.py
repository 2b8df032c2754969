"""Tests for data model classes."""

import datetime as dt
import io
import unittest

from metascraper.errors import StreamCloseError
from metascraper.models import FetchResult, PageMetadata, ResultRecord


class TestResultRecord(unittest.TestCase):
    """Verify ResultRecord creation, immutability and row layout."""

    def _record(self):
        return ResultRecord(
            date=dt.date(2024, 5, 1),
            url="https://example.com",
            status_code="200",
            title="Example",
            description="An example page",
        )

    def test_as_row_field_order(self):
        """Rows must be date, url, status_code, title, description."""
        self.assertEqual(
            self._record().as_row(),
            ["2024-05-01", "https://example.com", "200", "Example", "An example page"],
        )

    def test_row_has_five_fields_even_when_empty(self):
        record = ResultRecord(date=dt.date(2024, 5, 1), url="u", status_code="204", title="", description="")
        self.assertEqual(len(record.as_row()), 5)

    def test_record_is_immutable(self):
        record = self._record()
        with self.assertRaises(AttributeError):
            record.title = "other"


class TestPageMetadata(unittest.TestCase):
    def test_defaults_are_empty(self):
        meta = PageMetadata()
        self.assertEqual(meta.title, "")
        self.assertEqual(meta.description, "")


class TestFetchResult(unittest.TestCase):
    """Verify FetchResult releases its body."""

    def test_close_closes_body_without_response(self):
        body = io.BytesIO(b"<html></html>")
        with FetchResult(body=body, status_code=200):
            pass
        self.assertTrue(body.closed)

    def test_close_prefers_response(self):
        class Response:
            closed = False

            def close(self):
                self.closed = True

        response = Response()
        result = FetchResult(body=io.BytesIO(b""), status_code=200, response=response)
        result.close()
        self.assertTrue(response.closed)

    def test_close_failure_raises_stream_close_error(self):
        class BrokenResponse:
            def close(self):
                raise OSError("boom")

        result = FetchResult(body=io.BytesIO(b""), status_code=200, response=BrokenResponse())
        with self.assertRaises(StreamCloseError):
            result.close()


if __name__ == "__main__":
    unittest.main()
