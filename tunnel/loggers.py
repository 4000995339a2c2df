"""
Traffic loggers for TCPTunnel.

A logger receives the chunks of bytes flowing through the tunnel in
each direction: upstream (local port to remote host) and downstream
(remote host to local port). Console loggers print upstream data to
stdout and downstream data to stderr; file loggers write each
direction to its own file.
"""

from __future__ import annotations

from typing import BinaryIO, Optional, TextIO

from rich.console import Console


STRING_FILE_SUFFIX = ".txt"
BYTES_FILE_SUFFIX = ".bytes"


def format_byte_list(data: bytes, hex_output: bool = False) -> str:
    """
    Format bytes as a printable list of values.

    Args:
        data: Raw bytes
        hex_output: Render values as hex instead of decimal integers

    Returns:
        String such as "[72, 105]" or "[0x48, 0x69]"
    """
    if hex_output:
        values = [f"0x{b:02x}" for b in data]
    else:
        values = [str(b) for b in data]
    return "[" + ", ".join(values) + "]"


class TrafficLogger:
    """Base class for loggers of tunnelled traffic."""

    name = "logger"

    def upload(self, data: bytes) -> None:
        """Log a chunk sent from the local side to the remote host."""
        raise NotImplementedError

    def download(self, data: bytes) -> None:
        """Log a chunk sent from the remote host to the local side."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the logger."""

    def __enter__(self) -> "TrafficLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class _ConsoleLogger(TrafficLogger):
    """Shared console plumbing: one console per direction."""

    def __init__(self) -> None:
        self._up_console = Console(highlight=False, soft_wrap=True)
        self._down_console = Console(stderr=True, highlight=False, soft_wrap=True)

    def _print(self, console: Console, text: str) -> None:
        console.print(text, markup=False, emoji=False)


class ConsoleStringLogger(_ConsoleLogger):
    """Prints traffic decoded as text in the configured encoding."""

    name = "console-string"

    def __init__(self, encoding: str) -> None:
        super().__init__()
        self.encoding = encoding

    def upload(self, data: bytes) -> None:
        self._print(self._up_console, data.decode(self.encoding, errors="replace"))

    def download(self, data: bytes) -> None:
        self._print(self._down_console, data.decode(self.encoding, errors="replace"))


class ConsoleByteLogger(_ConsoleLogger):
    """Prints traffic as lists of byte values."""

    name = "console-bytes"

    def __init__(self, hex_output: bool = False) -> None:
        super().__init__()
        self.hex_output = hex_output

    def upload(self, data: bytes) -> None:
        self._print(self._up_console, format_byte_list(data, self.hex_output))

    def download(self, data: bytes) -> None:
        self._print(self._down_console, format_byte_list(data, self.hex_output))


class FileStringLogger(TrafficLogger):
    """
    Writes decoded traffic to one text file per direction.

    Files are named ``<path>.txt`` and written as UTF-8 regardless of
    the encoding used to decode the traffic.
    """

    name = "file-string"

    def __init__(self, down_path: str, up_path: str, encoding: str) -> None:
        """
        Open both output files.

        Args:
            down_path: Path prefix for downstream data
            up_path: Path prefix for upstream data
            encoding: Encoding used to decode traffic

        Raises:
            OSError: If either file cannot be opened
        """
        self.encoding = encoding
        self.down_filename = down_path + STRING_FILE_SUFFIX
        self.up_filename = up_path + STRING_FILE_SUFFIX
        self._down_file: Optional[TextIO] = open(self.down_filename, "w", encoding="utf-8")
        try:
            self._up_file: Optional[TextIO] = open(self.up_filename, "w", encoding="utf-8")
        except OSError:
            self._down_file.close()
            raise

    def upload(self, data: bytes) -> None:
        if self._up_file:
            self._up_file.write(data.decode(self.encoding, errors="replace"))
            self._up_file.flush()

    def download(self, data: bytes) -> None:
        if self._down_file:
            self._down_file.write(data.decode(self.encoding, errors="replace"))
            self._down_file.flush()

    def close(self) -> None:
        if self._down_file:
            self._down_file.close()
            self._down_file = None
        if self._up_file:
            self._up_file.close()
            self._up_file = None


class FileByteLogger(TrafficLogger):
    """Writes raw traffic to one binary file per direction (``<path>.bytes``)."""

    name = "file-bytes"

    def __init__(self, down_path: str, up_path: str) -> None:
        self.down_filename = down_path + BYTES_FILE_SUFFIX
        self.up_filename = up_path + BYTES_FILE_SUFFIX
        self._down_file: Optional[BinaryIO] = open(self.down_filename, "wb")
        try:
            self._up_file: Optional[BinaryIO] = open(self.up_filename, "wb")
        except OSError:
            self._down_file.close()
            raise

    def upload(self, data: bytes) -> None:
        if self._up_file:
            self._up_file.write(data)
            self._up_file.flush()

    def download(self, data: bytes) -> None:
        if self._down_file:
            self._down_file.write(data)
            self._down_file.flush()

    def close(self) -> None:
        if self._down_file:
            self._down_file.close()
            self._down_file = None
        if self._up_file:
            self._up_file.close()
            self._up_file = None
