"""The project manifest and its lock step."""

import shlex
from pathlib import Path

from .catalog import VersionCatalog
from .config import DEFAULT_DIRECTIVE, DEFAULT_LOCK_COMMAND
from .console import StatusLog
from .errors import ManifestError
from .models import Dependency, StepResult
from .parse_manifest import DeclarationParser
from .process import ProcessRunner


class ManifestFile:
    """A manifest on disk, its in-memory snapshot and lock file.

    The snapshot is read lazily and only replaced by ``reload()`` or by a
    successful rewrite.
    """

    def __init__(
        self,
        path: Path,
        catalog: VersionCatalog,
        runner: ProcessRunner,
        lockfile: Path | None = None,
        directive: str = DEFAULT_DIRECTIVE,
        lock_command: str = DEFAULT_LOCK_COMMAND,
        log: StatusLog | None = None,
    ):
        self.path = Path(path)
        self.lockfile = Path(lockfile) if lockfile else None
        self.catalog = catalog
        self.runner = runner
        self.parser = DeclarationParser(directive)
        self.lock_command = lock_command
        self.log = log or runner.log
        self._content: str | None = None

    @property
    def content(self) -> str:
        if self._content is None:
            self._content = self._read()
        return self._content

    def reload(self) -> None:
        """Discard in-memory edits and read the manifest from disk again."""
        self._content = self._read()

    def dependencies(self) -> list[Dependency]:
        """Return the declared dependencies in file order."""
        return [
            Dependency(
                name=declaration.name,
                options=declaration.options,
                constraint=declaration.constraint,
                installed_version=self.catalog.installed_version(declaration.name),
                catalog=self.catalog,
            )
            for declaration in self.parser.parse(self.content)
        ]

    def update_dependency(self, dependency: Dependency) -> StepResult:
        """Pin ``dependency`` to its in-memory version and run the lock step.

        Unversioned dependencies are not rewritten; the lock step alone
        moves them to the newest release it will resolve.

        Returns:
            Success only if the lock step ran and changed the lock file
        """
        if dependency.installed_version is not None:
            self._content = self.parser.rewrite(
                self.content, dependency.name, str(dependency.installed_version)
            )
            self._write()

        lock_before = self._read_lockfile()
        if not self.runner.system(self._lock_command(dependency.name)):
            return StepResult.failure("lock step failed")

        lock_after = self._read_lockfile()
        if lock_before is not None and lock_before == lock_after:
            return StepResult.failure("lock step left the lock file unchanged")

        return StepResult.success()

    def _lock_command(self, name: str) -> list[str]:
        return [part.format(name=name) for part in shlex.split(self.lock_command)]

    def _read(self) -> str:
        try:
            # newline="" keeps the file's own line endings intact
            with open(self.path, encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise ManifestError(self.path, e.strerror or str(e)) from e

    def _write(self) -> None:
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(self.content)
        except OSError as e:
            raise ManifestError(self.path, e.strerror or str(e)) from e

    def _read_lockfile(self) -> bytes | None:
        if self.lockfile is None or not self.lockfile.exists():
            return None
        try:
            return self.lockfile.read_bytes()
        except OSError as e:
            raise ManifestError(self.lockfile, e.strerror or str(e)) from e
