"""Pytest configuration and fixtures."""

from io import StringIO

import pytest
from packaging.version import Version
from rich.console import Console

from core.console import StatusLog
from core.process import format_command


class FakeRunner:
    """Records commands instead of running them.

    ``handlers`` maps the first word of a command to a callable taking the
    command and returning the exit status as a bool.
    """

    def __init__(self, log=None, captured=None, handlers=None):
        self.log = log
        self.captured = captured or {}
        self.handlers = handlers or {}
        self.commands = []
        self.capture_calls = []

    def system(self, command):
        self.commands.append(command)
        if self.log is not None:
            self.log.log_cmd(format_command(command))
        words = command.split() if isinstance(command, str) else list(command)
        handler = self.handlers.get(words[0])
        if handler is None:
            return True
        return handler(command)

    def capture(self, command):
        self.capture_calls.append(command)
        words = command.split() if isinstance(command, str) else list(command)
        return self.captured.get(words[0], "")

    def commands_starting_with(self, *words):
        matches = []
        for command in self.commands:
            parts = command.split() if isinstance(command, str) else list(command)
            if parts[: len(words)] == list(words):
                matches.append(command)
        return matches


class StubCatalog:
    """Catalog with fixed installed and published versions."""

    def __init__(self, installed=None, available=None):
        self.installed = {k: Version(v) for k, v in (installed or {}).items()}
        self.available = {
            k: [Version(v) for v in versions] for k, versions in (available or {}).items()
        }
        self.queries = []

    def installed_version(self, name):
        return self.installed.get(name)

    def available_versions(self, name, installed_version):
        if installed_version is None:
            return []
        self.queries.append(name)
        return self.available.get(name, [])

    def close(self):
        pass


@pytest.fixture
def output():
    """Buffer receiving everything written to the status log."""
    return StringIO()


@pytest.fixture
def status_log(output):
    return StatusLog(Console(file=output, highlight=False, width=200))


@pytest.fixture
def fake_runner(status_log):
    return FakeRunner(log=status_log)


@pytest.fixture
def sample_gemfile():
    """Sample Gemfile content for testing."""
    return """source 'https://rubygems.org'

gem 'rails', '~> 7.0.4'
gem "pg", ">= 1.1", "< 2.0"
gem 'puma', '5.6.5', require: false

group :development, :test do
  gem 'rspec-rails', '6.0.1'
  gem 'local_lib', path: '../local_lib'
end
"""


@pytest.fixture
def gemfile(tmp_path, sample_gemfile):
    """A Gemfile and lock file written to a temporary project."""
    path = tmp_path / "Gemfile"
    path.write_text(sample_gemfile)
    (tmp_path / "Gemfile.lock").write_text("GEM\n  specs:\n")
    return path


@pytest.fixture
def stub_catalog():
    """Factory for catalogs with fixed versions."""
    return StubCatalog
