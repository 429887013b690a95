from abc import ABC, abstractmethod
from pathlib import Path
import logging

from .archive_util import ArchiveUtil
from .platform_key import PlatformKey, download_url

logger = logging.getLogger(__name__)


class ToolInstaller(ABC):
    """Abstract base class for installers that produce a single executable."""

    @abstractmethod
    def install(self, version: str) -> Path:
        """Download and unpack the given version, returning the executable's path."""
        pass

    @property
    @abstractmethod
    def binary_name(self) -> str:
        """Return the file name the executable is cached under (e.g., 'cs', 'cs.exe')."""
        pass


class CoursierInstaller(ToolInstaller):
    """Installer for the Coursier launcher."""

    def __init__(self, downloader, platform_key: PlatformKey):
        self.downloader = downloader
        self.platform_key = platform_key
        self.archive_util = ArchiveUtil()

    def install(self, version: str) -> Path:
        """Fetch the cs archive for this platform, unpack it and mark it executable."""
        url = download_url(version, self.platform_key)
        downloaded = self.downloader.download(url)

        # Give the download its extension so the format is explicit
        archive = downloaded.with_name(downloaded.name + self.platform_key.archive_extension)
        downloaded.rename(archive)

        if archive.suffix == ".gz":
            binary = self.archive_util.gunzip(archive)
        else:
            dest_dir = archive.with_suffix("")
            binary = self.archive_util.extract_member(
                archive, self.platform_key.zip_member_name, dest_dir
            )

        self.archive_util.make_executable(binary)
        logger.debug("Installed cs %s at %s", version, binary)
        return binary

    @property
    def binary_name(self) -> str:
        return self.platform_key.binary_name
