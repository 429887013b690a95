import logging
import os
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from application.command_runner import CommandRunner
from application.dtos import PhaseResult, SetupInputs, SetupResult
from domain.environment import EnvironmentChanges
from infrastructure.actions_environment import ActionsEnvironment

logger = logging.getLogger(__name__)


class SetupCoursier:
    """Orchestrates installing cs, a JVM and the requested apps."""

    def __init__(
        self,
        inputs: SetupInputs,
        runner: CommandRunner,
        environment: ActionsEnvironment,
        home: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        self.inputs = inputs
        self.runner = runner
        self.environment = environment
        self.home = Path(home) if home else Path.home()
        self.env = os.environ if env is None else env

    def run(self) -> SetupResult:
        """Run the three phases in order, stopping at the first failure."""
        phases: List[PhaseResult] = []
        try:
            phases.append(self._run_phase("Install Coursier", self.install_coursier))
            phases.append(self._run_phase("Install JVM", self.install_jvm))
            phases.append(self._run_phase("Install Apps", self.install_apps))
        except Exception as e:
            message = str(e) or e.__class__.__name__
            self.environment.set_failed(message)
            return SetupResult(success=False, phases=phases, error_message=message)

        return SetupResult(success=True, phases=phases)

    def install_coursier(self, changes: EnvironmentChanges) -> None:
        tool_dir = self.runner.ensure_installed()
        changes.add_path(tool_dir)
        self.runner.run("--help")
        changes.set_output("cs-version", self.inputs.version)

    def install_jvm(self, changes: EnvironmentChanges) -> None:
        jvm = self.inputs.jvm
        java_home = self.env.get("JAVA_HOME")
        if not jvm and java_home:
            self.environment.info(f"skipping, JVM is already installed in {java_home}")
            return

        jvm_args = ["--jvm", jvm] if jvm else []
        self.runner.run("java", *jvm_args, "-version")
        cs_java_home = self.runner.run("java-home", *jvm_args)
        changes.export_variable("JAVA_HOME", cs_java_home)
        changes.add_path(os.path.join(cs_java_home, "bin"))

    def install_apps(self, changes: EnvironmentChanges) -> None:
        apps = self.inputs.apps.split()
        if not apps:
            return

        coursier_bin_dir = self.home / "cs" / "bin"
        coursier_bin_dir.mkdir(parents=True, exist_ok=True)
        changes.export_variable("COURSIER_BIN_DIR", str(coursier_bin_dir))
        changes.add_path(coursier_bin_dir)
        self.runner.run(
            "install", "--contrib", *apps,
            env={"COURSIER_BIN_DIR": str(coursier_bin_dir)},
        )

    def _run_phase(self, name: str, phase: Callable[[EnvironmentChanges], None]) -> PhaseResult:
        """Run one phase inside a log group and apply whatever it recorded, even on failure."""
        changes = EnvironmentChanges()
        with self.environment.group(name):
            try:
                phase(changes)
            except Exception:
                # Keep the phase error as the reported failure
                try:
                    self.environment.apply(changes)
                except Exception:
                    logger.exception("Could not apply environment changes of %s", name)
                raise
            self.environment.apply(changes)
        return PhaseResult(name=name, changes=list(changes))
