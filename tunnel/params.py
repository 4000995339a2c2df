"""
Configuration result for TCPTunnel.

Holds the values parsed from the command line together with their
defaults, the traffic loggers enabled for the run, and the error
report produced while parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from tunnel.loggers import (
    ConsoleByteLogger,
    ConsoleStringLogger,
    FileByteLogger,
    FileStringLogger,
    TrafficLogger,
)


DEFAULT_BUFFER_SIZE = 1024
DEFAULT_ENCODING = "UTF-8"
DEFAULT_DOWN_PATH = "tcp_down"
DEFAULT_UP_PATH = "tcp_up"


class ErrorKind(Enum):
    """Categories of problems found while parsing the command line."""
    TOKENIZATION = "tokenization"
    VALUE = "value"
    UNKNOWN = "unknown"
    RESOURCE = "resource"
    ARGUMENT_COUNT = "argument-count"


@dataclass(frozen=True)
class ParseError:
    """A single problem found in the command line."""
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class Params:
    """
    Parsed configuration for one tunnel run.

    Error records are kept in ``error_list``; ``errors`` renders them as
    the newline-joined report, where an empty string means success.
    """
    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: str = DEFAULT_ENCODING
    down_path: str = DEFAULT_DOWN_PATH
    up_path: str = DEFAULT_UP_PATH
    source_port: int = 0
    remote_host: Optional[str] = None
    remote_port: int = 0
    should_run: bool = True
    loggers: List[TrafficLogger] = field(default_factory=list)
    error_list: List[ParseError] = field(default_factory=list)

    @property
    def errors(self) -> str:
        """Error report, one line per problem."""
        return "\n".join(error.message for error in self.error_list)

    def set_errors(self, errors: List[ParseError]) -> None:
        """Replace the error records with the given ones."""
        self.error_list = list(errors)

    def enable_string_console_logger(self) -> None:
        """Print decoded traffic to stdout (upstream) and stderr (downstream)."""
        self.loggers.append(ConsoleStringLogger(self.encoding))

    def enable_byte_console_logger(self, hex_output: bool) -> None:
        """Print traffic as lists of byte values, as ints or hex."""
        self.loggers.append(ConsoleByteLogger(hex_output))

    def enable_string_file_logger(self, down_path: str, up_path: str) -> None:
        """
        Write decoded traffic to text files.

        Raises:
            OSError: If either file cannot be opened
        """
        self.loggers.append(FileStringLogger(down_path, up_path, self.encoding))

    def enable_byte_file_logger(self, down_path: str, up_path: str) -> None:
        """
        Write raw traffic to binary files.

        Raises:
            OSError: If either file cannot be opened
        """
        self.loggers.append(FileByteLogger(down_path, up_path))

    def close_loggers(self) -> None:
        """Close every enabled logger."""
        for logger in self.loggers:
            logger.close()

    @property
    def has_errors(self) -> bool:
        """Whether any problem was found while parsing."""
        return bool(self.error_list)
