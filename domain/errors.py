class SetupError(Exception):
    """Base class for errors that fail a setup run."""


class UnsupportedArchitectureError(SetupError):
    def __init__(self, machine: str):
        self.machine = machine
        super().__init__(f"Coursier does not have support for the {machine} architecture")


class UnsupportedPlatformError(SetupError):
    def __init__(self, system: str):
        self.system = system
        super().__init__(f"Unknown platform: {system}")


class DownloadError(SetupError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Couldn't download Coursier from {url}: {reason}")


class CommandError(SetupError):
    def __init__(self, command, returncode: int):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"Command '{' '.join(self.command)}' failed with exit code {returncode}"
        )
