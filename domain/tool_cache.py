from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Tuple


class ToolCache(ABC):
    """
    Abstract repository interface for installed tool binaries.

    Entries are keyed by (tool name, version) and map to a directory
    holding the ready-to-run executable.
    """

    @abstractmethod
    def find(self, tool: str, version: str) -> Optional[Path]:
        """
        Look up a cached tool.

        Args:
            tool: Tool name (e.g. "cs")
            version: Version string the entry was stored under

        Returns:
            Directory containing the executable, or None if not cached
        """
        pass

    @abstractmethod
    def cache_file(self, source: Path, target_name: str, tool: str, version: str) -> Path:
        """
        Store a single executable file in the cache.

        This should:
        1. Create a fresh entry directory for (tool, version)
        2. Copy source into it as target_name, keeping its mode bits
        3. Mark the entry as complete

        Args:
            source: Path of the file to store
            target_name: File name inside the entry directory
            tool: Tool name
            version: Version string

        Returns:
            The entry directory

        Raises:
            IOError: If storage fails
        """
        pass

    @abstractmethod
    def get_or_install(
        self,
        tool: str,
        version: str,
        install: Callable[[], Tuple[Path, str]],
    ) -> Tuple[Path, bool]:
        """
        Return the cached directory for (tool, version), installing it first if needed.

        install is only called on a miss and must return the path of the
        produced file and the name to store it under. Callers for the same
        key are serialized.

        Returns:
            (entry directory, True on cache hit)
        """
        pass
