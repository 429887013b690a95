import logging
import tempfile
import uuid
from pathlib import Path
from typing import Optional

import requests

from domain.constants import BLOCK_SIZE
from domain.errors import DownloadError

logger = logging.getLogger(__name__)


class HttpDownloader:
    """Fetches release archives into a temporary directory."""

    def __init__(self, temp_dir: Optional[Path] = None, timeout: Optional[float] = None):
        """
        Initialize the downloader.

        Args:
            temp_dir: Where downloads land (system temp dir if None)
            timeout: requests timeout in seconds; None waits indefinitely
        """
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self.timeout = timeout

    def download(self, url: str) -> Path:
        """
        Download url to <temp_dir>/<random name>.

        Returns:
            Path of the downloaded file

        Raises:
            DownloadError: On HTTP error status or connection failure
        """
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        dest = self.temp_dir / str(uuid.uuid4())

        logger.info("Downloading %s", url)
        try:
            with requests.get(url, stream=True, timeout=self.timeout) as response:
                if response.status_code != 200:
                    raise DownloadError(url, f"unexpected HTTP response: {response.status_code}")

                with open(dest, "wb") as f:
                    for chunk in response.iter_content(chunk_size=BLOCK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise DownloadError(url, str(e)) from e

        logger.debug("Downloaded %s to %s", url, dest)
        return dest
