import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from domain.constants import TOOL_NAME
from domain.errors import CommandError
from domain.installer import ToolInstaller
from domain.tool_cache import ToolCache

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs the cached cs binary, installing it on first use."""

    def __init__(
        self,
        tool_cache: ToolCache,
        installer: ToolInstaller,
        version: str,
        extra_args: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            tool_cache: Where installed binaries are looked up and stored
            installer: Produces the binary on a cache miss
            version: cs version to run
            extra_args: Arguments placed before every command's own arguments
        """
        self.tool_cache = tool_cache
        self.installer = installer
        self.version = version
        self.extra_args = list(extra_args or [])
        self._tool_dir: Optional[Path] = None

    def ensure_installed(self) -> Path:
        """Return the directory holding cs, downloading it if it is not cached yet."""
        if self._tool_dir is None:
            tool_dir, cache_hit = self.tool_cache.get_or_install(
                TOOL_NAME, self.version, self._install
            )
            if cache_hit:
                logger.info("Using cached cs %s from %s", self.version, tool_dir)
            self._tool_dir = tool_dir
        return self._tool_dir

    def build_command(self, *args: str) -> List[str]:
        binary = self.ensure_installed() / self.installer.binary_name
        return [str(binary)] + self.extra_args + [arg for arg in args if arg]

    def run(self, *args: str, env: Optional[Dict[str, str]] = None) -> str:
        """
        Run cs with args (empty ones dropped) and return its trimmed stdout.

        stdout is echoed to the run log; stderr goes straight through.

        Raises:
            CommandError: If cs exits with a non-zero code
        """
        cmd = self.build_command(*args)

        run_env = None
        if env:
            run_env = os.environ.copy()
            run_env.update(env)

        logger.info("[command]%s", " ".join(cmd))
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            env=run_env,
            text=True,
        )

        if result.stdout:
            sys.stdout.write(result.stdout)
            sys.stdout.flush()

        if result.returncode != 0:
            raise CommandError(cmd, result.returncode)

        return (result.stdout or "").strip()

    def _install(self):
        binary = self.installer.install(self.version)
        return binary, self.installer.binary_name
