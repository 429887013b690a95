import logging
import os
import shutil
import threading
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from domain.tool_cache import ToolCache

logger = logging.getLogger(__name__)


class FileSystemToolCache(ToolCache):
    """
    Tool cache laid out like the hosted runner tool cache:

        <cache_dir>/<tool>/<version>/<arch>/<binary>
        <cache_dir>/<tool>/<version>/<arch>.complete
    """

    def __init__(self, cache_dir: Path, arch: str):
        self.cache_dir = Path(cache_dir)
        self.arch = arch
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._key_locks: Dict[Tuple[str, str], threading.Lock] = {}

    def find(self, tool: str, version: str) -> Optional[Path]:
        """Return the entry directory if it exists and is marked complete."""
        if not tool or not version:
            raise ValueError("tool and version are required")

        entry_dir = self._get_entry_dir(tool, version)
        if entry_dir.is_dir() and self._get_marker_path(tool, version).is_file():
            logger.debug("Found %s %s in tool cache: %s", tool, version, entry_dir)
            return entry_dir

        logger.debug("%s %s not found in tool cache", tool, version)
        return None

    def cache_file(self, source: Path, target_name: str, tool: str, version: str) -> Path:
        """Copy source into a fresh entry for (tool, version) and mark it complete."""
        source = Path(source)
        if not source.is_file():
            raise IOError(f"Not a file: {source}")

        entry_dir = self._get_entry_dir(tool, version)
        marker = self._get_marker_path(tool, version)

        # Start from a clean entry so a half-written one is never reused
        if marker.exists():
            marker.unlink()
        if entry_dir.exists():
            shutil.rmtree(entry_dir)
        entry_dir.mkdir(parents=True)

        # copy2 keeps the executable bit
        shutil.copy2(source, entry_dir / target_name)

        marker.write_text("")
        logger.info("Cached %s %s in %s", tool, version, entry_dir)
        return entry_dir

    def get_or_install(
        self,
        tool: str,
        version: str,
        install: Callable[[], Tuple[Path, str]],
    ) -> Tuple[Path, bool]:
        """Find (tool, version), else run install and store its result, under a per-key lock."""
        with self._get_key_lock(tool, version):
            cached = self.find(tool, version)
            if cached is not None:
                return cached, True

            binary_path, target_name = install()
            return self.cache_file(binary_path, target_name, tool, version), False

    def _get_key_lock(self, tool: str, version: str) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault((tool, version), threading.Lock())

    def _get_entry_dir(self, tool: str, version: str) -> Path:
        return self.cache_dir / tool / version / self.arch

    def _get_marker_path(self, tool: str, version: str) -> Path:
        return self.cache_dir / tool / version / f"{self.arch}.complete"


def default_cache_dir() -> Path:
    """RUNNER_TOOL_CACHE when running on a hosted runner, else a per-user cache."""
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return Path.home() / ".cache" / "setup-coursier"
