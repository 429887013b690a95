import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

from domain.errors import DownloadError
from infrastructure.http_downloader import HttpDownloader


URL = "https://github.com/coursier/coursier/releases/download/v2.1.0/cs-x86_64-pc-linux.gz"


def _response(status_code=200, chunks=(b"abc", b"", b"def")):
    response = MagicMock()
    response.status_code = status_code
    response.iter_content.return_value = iter(chunks)
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


class TestHttpDownloader(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.temp_dir = Path(self._tmp.name)
        self.downloader = HttpDownloader(self.temp_dir)

    def tearDown(self):
        self._tmp.cleanup()

    @patch('infrastructure.http_downloader.requests.get')
    def test_download_writes_body_to_temp_dir(self, mock_get):
        """Test the response body is streamed into a new file."""
        mock_get.return_value = _response()

        path = self.downloader.download(URL)

        self.assertEqual(path.parent, self.temp_dir)
        self.assertEqual(path.read_bytes(), b"abcdef")
        self.assertEqual(path.suffix, "")
        mock_get.assert_called_once_with(URL, stream=True, timeout=None)

    @patch('infrastructure.http_downloader.requests.get')
    def test_download_uses_unique_names(self, mock_get):
        """Test two downloads never overwrite each other."""
        mock_get.side_effect = [_response(), _response()]

        first = self.downloader.download(URL)
        second = self.downloader.download(URL)

        self.assertNotEqual(first, second)

    @patch('infrastructure.http_downloader.requests.get')
    def test_download_passes_timeout(self, mock_get):
        """Test a configured timeout is handed to requests."""
        mock_get.return_value = _response()
        downloader = HttpDownloader(self.temp_dir, timeout=30)

        downloader.download(URL)

        mock_get.assert_called_once_with(URL, stream=True, timeout=30)

    @patch('infrastructure.http_downloader.requests.get')
    def test_download_http_error(self, mock_get):
        """Test a non-200 response fails the download."""
        mock_get.return_value = _response(status_code=404)

        with self.assertRaises(DownloadError) as ctx:
            self.downloader.download(URL)

        self.assertIn("404", str(ctx.exception))
        self.assertEqual(ctx.exception.url, URL)

    @patch('infrastructure.http_downloader.requests.get')
    def test_download_connection_error(self, mock_get):
        """Test connection failures are not retried."""
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(DownloadError):
            self.downloader.download(URL)

        mock_get.assert_called_once()

    def test_default_temp_dir(self):
        """Test the system temp dir is used when none is given."""
        downloader = HttpDownloader()

        self.assertEqual(downloader.temp_dir, Path(tempfile.gettempdir()))


if __name__ == '__main__':
    unittest.main()
