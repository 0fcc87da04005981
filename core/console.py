"""Line-oriented status output."""

from rich.console import Console


class StatusLog:
    """Status messages at three levels of indentation.

    ``Updating rails``            -- log
    ``  - Running test suite``    -- log_indent
    ``    > bundle update rails`` -- log_cmd
    """

    INDENT = "  - "
    COMMAND = "    > "

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def log(self, msg: str, prefix: str = "") -> None:
        self.console.print(prefix + msg, markup=False, soft_wrap=True)

    def log_indent(self, msg: str) -> None:
        self.log(msg, self.INDENT)

    def log_cmd(self, msg: str) -> None:
        self.log(msg, self.COMMAND)

    def error(self, msg: str) -> None:
        self.console.print(f"Error: {msg}", style="red", markup=False, soft_wrap=True)
