"""CLI application for depstep."""

from pathlib import Path

import typer
from rich.console import Console

from core.config import (
    DEFAULT_DIRECTIVE,
    DEFAULT_INSTALLED_COMMAND,
    DEFAULT_LOCK_COMMAND,
    DEFAULT_LOCKFILE,
    DEFAULT_MANIFEST,
    DEFAULT_REGISTRY_URL,
    DEFAULT_SKIP_FILE,
    DEFAULT_TEST_COMMAND,
    DEFAULT_TIMEOUT,
    Settings,
)
from core.console import StatusLog
from core.models import UpdateOutcome
from core.updater import AutoUpdater

console = Console(highlight=False)

EXIT_REJECTED = 3


def build_test_command(use_args: bool, args: list[str] | None, default: str) -> str:
    """Join the arguments given after ``-c`` into a single test command."""
    if use_args and args:
        return " ".join(args)
    return default


app = typer.Typer(
    name="depstep",
    help="depstep - Update dependencies one tier at a time, keeping only what passes the tests",
    add_completion=False,
)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        # options end at the first word of the test command
        "allow_interspersed_args": False,
    },
)
def update(
    test_args: list[str] | None = typer.Argument(
        None, help="Test command, used when -c is given (e.g. -c bundle exec rspec)"
    ),
    use_command: bool = typer.Option(
        False, "-c", "--command", help="Treat the remaining arguments as the test command"
    ),
    test_command: str = typer.Option(
        DEFAULT_TEST_COMMAND, "--test-command", envvar="DEPSTEP_TEST_COMMAND",
        help="Test command when -c is not given",
    ),
    project_dir: Path = typer.Option(
        Path("."), "--project-dir", envvar="DEPSTEP_PROJECT_DIR", help="Project checkout"
    ),
    manifest: Path = typer.Option(
        Path(DEFAULT_MANIFEST), "--manifest", envvar="DEPSTEP_MANIFEST", help="Manifest file"
    ),
    lockfile: Path = typer.Option(
        Path(DEFAULT_LOCKFILE), "--lockfile", envvar="DEPSTEP_LOCKFILE", help="Lock file"
    ),
    skip_file: Path = typer.Option(
        Path(DEFAULT_SKIP_FILE), "--skip-file", envvar="DEPSTEP_SKIP_FILE",
        help="File listing dependencies to leave alone, one per line",
    ),
    directive: str = typer.Option(
        DEFAULT_DIRECTIVE, "--directive", help="Token that starts a declaration line"
    ),
    lock_command: str = typer.Option(
        DEFAULT_LOCK_COMMAND, "--lock-command", help="Lock step, {name} is the dependency"
    ),
    installed_command: str = typer.Option(
        DEFAULT_INSTALLED_COMMAND, "--installed-command", help="Lists installed versions"
    ),
    registry_url: str = typer.Option(
        DEFAULT_REGISTRY_URL, "--registry-url", envvar="DEPSTEP_REGISTRY_URL",
        help="Versions endpoint, {name} is the dependency",
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Registry timeout in seconds"),
) -> None:
    """Update each dependency to its latest patch, minor and major version in turn."""
    if test_args and not use_command:
        console.print("Error: Pass -c before the test command", style="red")
        raise typer.Exit(1)

    settings = Settings(
        test_command=build_test_command(use_command, test_args, test_command),
        project_dir=project_dir,
        manifest=manifest,
        lockfile=lockfile,
        skip_file=skip_file,
        directive=directive,
        lock_command=lock_command,
        installed_command=installed_command,
        registry_url=registry_url,
        timeout=timeout,
    )
    log = StatusLog(console)

    if not settings.manifest_path.exists():
        log.error(f"Manifest {settings.manifest_path} not found")
        raise typer.Exit(1)

    try:
        reports = AutoUpdater(settings, log=log).auto_update()
    except Exception as e:
        log.error(str(e))
        raise typer.Exit(1)

    if any(report.outcome == UpdateOutcome.REJECTED for report in reports if not report.skipped):
        raise typer.Exit(EXIT_REJECTED)


if __name__ == "__main__":
    app()
