"""End-to-end tests for the command-line entry point."""

import csv
import io
import os
import tempfile
import unittest
from unittest import mock

import main
from metascraper.config import Settings


class _Raw(io.BytesIO):
    decode_content = False


class _Response:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self.raw = _Raw(body)

    def close(self):
        self.raw.close()


def _fake_get(url, timeout, stream):
    if "missing" in url:
        return _Response(404, b"")
    return _Response(200, f"<html><head><title>{url}</title></head></html>".encode())


@mock.patch("main.load_settings", return_value=Settings())
@mock.patch("metascraper.fetcher.requests.get", side_effect=_fake_get)
class TestMain(unittest.TestCase):
    """Verify CLI wiring, output rows and construction failures."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.output = os.path.join(self.tmpdir.name, "out.csv")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_writes_one_row_per_successful_url(self, get, load):
        code = main.main(
            ["--output", self.output, "--retries", "1", "--log-level", "ERROR", "https://a", "https://missing"]
        )
        self.assertEqual(code, 0)
        with open(self.output, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0][1:], ["https://a", "200", "https://a", ""])

    def test_reads_urls_from_input_file(self, get, load):
        input_path = os.path.join(self.tmpdir.name, "urls.txt")
        with open(input_path, "w", encoding="utf-8") as f:
            f.write("https://b\n\nhttps://c\n")
        code = main.main(["--output", self.output, "--input", input_path, "--log-level", "ERROR", "https://a"])
        self.assertEqual(code, 0)
        with open(self.output, newline="", encoding="utf-8") as f:
            urls = {row[1] for row in csv.reader(f)}
        self.assertEqual(urls, {"https://a", "https://b", "https://c"})

    def test_invalid_timeout_fails_before_output(self, get, load):
        code = main.main(["--output", self.output, "--timeout", "soon", "--log-level", "ERROR", "https://a"])
        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(self.output))
        get.assert_not_called()

    def test_missing_input_file_fails_before_output(self, get, load):
        missing = os.path.join(self.tmpdir.name, "nope.txt")
        with self.assertLogs("metascraper.main", level="ERROR") as logs:
            code = main.main(["--output", self.output, "--input", missing, "--log-level", "ERROR", "https://a"])
        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(self.output))
        self.assertIn("failed to read input", logs.output[0])
        get.assert_not_called()

    def test_undecodable_input_file_fails(self, get, load):
        input_path = os.path.join(self.tmpdir.name, "urls.txt")
        with open(input_path, "wb") as f:
            f.write(b"\xff\xfe\xfa\n")
        with self.assertLogs("metascraper.main", level="ERROR") as logs:
            code = main.main(["--output", self.output, "--input", input_path, "--log-level", "ERROR"])
        self.assertEqual(code, 1)
        self.assertIn("failed to read input", logs.output[0])

    def test_unwritable_output_fails(self, get, load):
        bad = os.path.join(self.tmpdir.name, "nope", "out.csv")
        code = main.main(["--output", bad, "--log-level", "ERROR", "https://a"])
        self.assertEqual(code, 1)
        get.assert_not_called()


if __name__ == "__main__":
    unittest.main()
