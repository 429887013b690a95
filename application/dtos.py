from dataclasses import dataclass, field
from typing import List, Optional

from domain.constants import DEFAULT_VERSION
from domain.environment import EnvironmentChange


@dataclass(frozen=True)
class SetupInputs:
    version: str = DEFAULT_VERSION
    cs_args: str = ""
    jvm: str = ""
    apps: str = ""


@dataclass
class PhaseResult:
    name: str
    changes: List[EnvironmentChange] = field(default_factory=list)


@dataclass
class SetupResult:
    success: bool
    phases: List[PhaseResult]
    error_message: Optional[str] = None
