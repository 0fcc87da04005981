"""Run configuration for depstep."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_TEST_COMMAND = "rake"
DEFAULT_MANIFEST = "Gemfile"
DEFAULT_LOCKFILE = "Gemfile.lock"
DEFAULT_SKIP_FILE = ".depstep-skip"
DEFAULT_DIRECTIVE = "gem"
DEFAULT_LOCK_COMMAND = "bundle update {name} --quiet"
DEFAULT_INSTALLED_COMMAND = "bundle list"
DEFAULT_REGISTRY_URL = "https://rubygems.org/api/v1/versions/{name}.json"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Settings for one run. Relative paths resolve against ``project_dir``."""

    test_command: str = DEFAULT_TEST_COMMAND
    project_dir: Path = Path(".")
    manifest: Path = Path(DEFAULT_MANIFEST)
    lockfile: Path = Path(DEFAULT_LOCKFILE)
    skip_file: Path = Path(DEFAULT_SKIP_FILE)
    directive: str = DEFAULT_DIRECTIVE
    lock_command: str = DEFAULT_LOCK_COMMAND
    installed_command: str = DEFAULT_INSTALLED_COMMAND
    registry_url: str = DEFAULT_REGISTRY_URL
    timeout: float = DEFAULT_TIMEOUT

    def resolve(self, path: Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else Path(self.project_dir).resolve() / path

    @property
    def manifest_path(self) -> Path:
        return self.resolve(self.manifest)

    @property
    def lockfile_path(self) -> Path:
        return self.resolve(self.lockfile)

    @property
    def skip_file_path(self) -> Path:
        return self.resolve(self.skip_file)
