"""
Display module for TCPTunnel.

Provides rich terminal output for the help text, parse errors and
the resolved tunnel configuration.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

if TYPE_CHECKING:
    from tunnel.params import Params


# Color scheme for logger types
LOGGER_COLORS = {
    "console-string": "cyan",
    "console-bytes": "green",
    "file-string": "bright_blue",
    "file-bytes": "magenta",
}


class Display:
    """
    Rich terminal display for TCPTunnel.

    Help and summaries go to stdout; errors go to stderr
    so they stay visible when traffic is redirected.
    """

    def __init__(self, use_color: bool = True, console: Optional[Console] = None) -> None:
        """
        Initialize the display.

        Args:
            use_color: Whether to use colored output
            console: Console to print to, mainly for tests
        """
        self._console = console or Console(color_system="auto" if use_color else None)
        self._err_console = console or Console(stderr=True, color_system="auto" if use_color else None)

    def print_help(self, text: str) -> None:
        """Print the help text verbatim."""
        self._console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def print_banner(self, params: "Params") -> None:
        """
        Print the resolved tunnel configuration.

        Args:
            params: Parsed configuration
        """
        logger_names = [
            f"[{LOGGER_COLORS.get(logger.name, 'white')}]{logger.name}[/]"
            for logger in params.loggers
        ]
        lines = [
            "[bold cyan]TCPTunnel[/] - Capture data flowing between two points",
            "",
            f"[yellow]Tunnel:[/] localhost:{params.source_port} -> "
            f"{escape(str(params.remote_host))}:{params.remote_port}",
            f"[yellow]Buffer size:[/] {params.buffer_size} bytes",
            f"[yellow]Encoding:[/] {escape(params.encoding)}",
            f"[yellow]Loggers:[/] {', '.join(logger_names) or '[dim]none[/]'}",
        ]

        panel = Panel(
            "\n".join(lines),
            title="[bold white]Configuration[/]",
            border_style="cyan",
        )
        self._console.print(panel)

    def print_errors(self, errors: str) -> None:
        """Print each line of an error report."""
        for line in errors.splitlines():
            self.print_error(line)

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self._err_console.print(f"[bold red]Error:[/] {escape(message)}", highlight=False)

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self._console.print(f"[bold blue]Info:[/] {escape(message)}")
