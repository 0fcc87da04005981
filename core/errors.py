"""Exceptions raised by depstep."""


class DepstepError(Exception):
    """Base class for errors that abort a run."""


class ManifestError(DepstepError):
    """The manifest could not be read or written."""

    def __init__(self, path, reason: str):
        super().__init__(f"Cannot access manifest {path}: {reason}")
        self.path = path


class CommandError(DepstepError):
    """An external command whose output is needed exited with an error."""

    def __init__(self, command, returncode: int, stderr: str = ""):
        message = f"Command failed ({returncode}): {command}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class CatalogError(DepstepError):
    """The registry could not supply versions for a dependency."""
