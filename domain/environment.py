"""Changes a setup run makes to the surrounding automation environment."""

from dataclasses import dataclass, field
from typing import List, Union


@dataclass(frozen=True)
class AddPath:
    """Prepend a directory to PATH."""
    path: str


@dataclass(frozen=True)
class ExportVariable:
    """Set an environment variable for this and later steps."""
    name: str
    value: str


@dataclass(frozen=True)
class SetOutput:
    """Publish a named step output."""
    name: str
    value: str


EnvironmentChange = Union[AddPath, ExportVariable, SetOutput]


@dataclass
class EnvironmentChanges:
    """Ordered list of changes recorded by one phase of a run."""
    changes: List[EnvironmentChange] = field(default_factory=list)

    def add_path(self, path) -> None:
        self.changes.append(AddPath(str(path)))

    def export_variable(self, name: str, value: str) -> None:
        self.changes.append(ExportVariable(name, str(value)))

    def set_output(self, name: str, value: str) -> None:
        self.changes.append(SetOutput(name, str(value)))

    def __iter__(self):
        return iter(self.changes)
