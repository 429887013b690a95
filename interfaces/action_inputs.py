import os
from typing import Mapping, Optional

from application.dtos import SetupInputs
from domain.constants import DEFAULT_VERSION


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Read an action input the way the runner passes it: INPUT_<NAME>, trimmed."""
    environ = os.environ if environ is None else environ
    value = environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "")
    return value.strip()


def load_inputs(environ: Optional[Mapping[str, str]] = None) -> SetupInputs:
    """Build SetupInputs from the action's inputs, defaulting the version."""
    return SetupInputs(
        version=get_input("version", environ) or DEFAULT_VERSION,
        cs_args=get_input("cs-args", environ),
        jvm=get_input("jvm", environ),
        apps=get_input("apps", environ),
    )
