import logging
import os
import sys
import uuid
from contextlib import contextmanager
from typing import Iterable, Mapping, MutableMapping, Optional

from domain.environment import AddPath, EnvironmentChange, ExportVariable, SetOutput

logger = logging.getLogger(__name__)


class ActionsEnvironment:
    """Publishes PATH entries, variables and outputs to a GitHub Actions runner."""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None, stream=None):
        """
        Args:
            environ: Environment to read runner files from and update (os.environ if None)
            stream: Where workflow commands are printed (stdout if None)
        """
        self.environ = os.environ if environ is None else environ
        self.stream = stream

    def apply(self, changes: Iterable[EnvironmentChange]) -> None:
        """Apply changes in order."""
        for change in changes:
            if isinstance(change, AddPath):
                self.add_path(change.path)
            elif isinstance(change, ExportVariable):
                self.export_variable(change.name, change.value)
            elif isinstance(change, SetOutput):
                self.set_output(change.name, change.value)
            else:
                raise TypeError(f"Unsupported environment change: {change!r}")

    def add_path(self, path: str) -> None:
        self._append_to_file("GITHUB_PATH", f"{path}\n")
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = f"{path}{os.pathsep}{current}" if current else path
        logger.debug("Added %s to PATH", path)

    def export_variable(self, name: str, value: str) -> None:
        self.environ[name] = value
        self._append_to_file("GITHUB_ENV", _key_value_message(name, value))
        logger.debug("Exported %s=%s", name, value)

    def set_output(self, name: str, value: str) -> None:
        if not self._append_to_file("GITHUB_OUTPUT", _key_value_message(name, value)):
            logger.info("Output %s=%s", name, value)

    def info(self, message: str) -> None:
        logger.info(message)

    def set_failed(self, message: str) -> None:
        self._command("error", message)
        logger.error(message)

    @contextmanager
    def group(self, name: str):
        """Fold everything logged inside the block under name."""
        self._command("group", name)
        try:
            yield
        finally:
            self._command("endgroup", "")

    def _command(self, command: str, message: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(f"::{command}::{_escape_data(message)}\n")
        stream.flush()

    def _append_to_file(self, variable: str, content: str) -> bool:
        file_path = self.environ.get(variable)
        if not file_path:
            return False
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(content)
        return True


def _key_value_message(name: str, value: str) -> str:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ValueError("Unexpected input: value should not contain the delimiter")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def runner_temp_dir(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    environ = os.environ if environ is None else environ
    return environ.get("RUNNER_TEMP") or None
