"""
Command-line parsing for TCPTunnel.

Turns the raw argument vector into a ``Params`` configuration. All
problems are collected and reported together through the configuration's
error report instead of stopping at the first one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from tunnel.display import Display
from tunnel.loggers import BYTES_FILE_SUFFIX, STRING_FILE_SUFFIX
from tunnel.params import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_DOWN_PATH,
    DEFAULT_ENCODING,
    DEFAULT_UP_PATH,
    ErrorKind,
    Params,
    ParseError,
)


OPTION_PREFIX = "--"
HELP_OPTION = "--help"
HEX_OPTION = "--hex"
LOGGER_OPTION = "--logger"

# Options that take no value
STANDALONE_OPTIONS = (HELP_OPTION, HEX_OPTION)
STANDALONE_VALUE = "true"

DEFAULT_LOGGER = "console-string"

MIN_PORT = 1
MAX_PORT = 65535
PARAM_COUNT = 3

INT_PATTERN = re.compile(r"[+-]?[0-9]+")
INT_MIN = -2**31
INT_MAX = 2**31 - 1


@dataclass(frozen=True)
class Option:
    """A command-line option and its unparsed value."""
    name: str
    value: str


@dataclass
class OptionState:
    """Flags gathered in the first option pass for use in the second."""
    hex_output: bool = False
    logger_count: int = 0


def tokenize(args: Sequence[str]) -> Tuple[List[Option], List[str], List[ParseError]]:
    """
    Split arguments into options and positional parameters.

    An empty argument list is treated as a request for help. A missing
    value for an option stops tokenizing, the rest of the arguments are
    ignored.

    Args:
        args: Raw command-line arguments

    Returns:
        Tuple of (options, positional parameters, errors)
    """
    if not args:
        args = [HELP_OPTION]

    options: List[Option] = []
    positionals: List[str] = []
    errors: List[ParseError] = []

    i = 0
    while i < len(args):
        arg = args[i]
        if not arg.startswith(OPTION_PREFIX):
            positionals.append(arg)
        elif arg in STANDALONE_OPTIONS:
            options.append(Option(arg, STANDALONE_VALUE))
        elif i + 1 >= len(args):
            errors.append(ParseError(
                ErrorKind.TOKENIZATION,
                f"No value given for option {arg}. Please provide one."
            ))
            break
        else:
            options.append(Option(arg, args[i + 1]))
            i += 1
        i += 1

    return options, positionals, errors


def parse_int(value: str) -> int:
    """
    Parse a signed 32-bit decimal integer.

    Only ASCII digits with an optional sign are accepted, no whitespace
    or underscores.

    Raises:
        ValueError: If the value is not such an integer
    """
    if not INT_PATTERN.fullmatch(value):
        raise ValueError(f"not an integer: {value!r}")
    number = int(value)
    if number < INT_MIN or number > INT_MAX:
        raise ValueError(f"integer out of range: {value!r}")
    return number


def _apply_buffer_size(option: Option, params: Params, state: OptionState) -> Optional[ParseError]:
    try:
        buffer_size = parse_int(option.value)
    except ValueError:
        return ParseError(ErrorKind.VALUE, f"Invalid number for 'buffersize': '{option.value}'.")

    # Stored even when invalid so the value can still be shown
    params.buffer_size = buffer_size
    if buffer_size <= 0:
        return ParseError(ErrorKind.VALUE, f"Buffer size has to be > 0, was: {buffer_size}.")
    return None


def is_supported_encoding(encoding: str) -> bool:
    """Check that Python has a text codec with the given name."""
    try:
        "".encode(encoding)
    except (LookupError, ValueError, TypeError):
        return False
    return True


def _apply_encoding(option: Option, params: Params, state: OptionState) -> Optional[ParseError]:
    params.encoding = option.value
    if not is_supported_encoding(option.value):
        return ParseError(ErrorKind.VALUE, f"Unsupported encoding: '{option.value}'.")
    return None


def _apply_down_path(option: Option, params: Params, state: OptionState) -> Optional[ParseError]:
    params.down_path = option.value
    return None


def _apply_up_path(option: Option, params: Params, state: OptionState) -> Optional[ParseError]:
    params.up_path = option.value
    return None


def _apply_hex(option: Option, params: Params, state: OptionState) -> Optional[ParseError]:
    state.hex_output = True
    return None


def _count_logger(option: Option, params: Params, state: OptionState) -> Optional[ParseError]:
    # Loggers are created in the second pass
    state.logger_count += 1
    return None


OptionHandler = Callable[[Option, Params, OptionState], Optional[ParseError]]

OPTION_HANDLERS: Dict[str, OptionHandler] = {
    "--buffersize": _apply_buffer_size,
    "--encoding": _apply_encoding,
    "--down": _apply_down_path,
    "--up": _apply_up_path,
    HEX_OPTION: _apply_hex,
    LOGGER_OPTION: _count_logger,
}


class LoggerType(NamedTuple):
    """How to enable one type of traffic logger."""
    description: str
    enable: Callable[[Params, bool], None]


LOGGER_TYPES: Dict[str, LoggerType] = {
    "console-string": LoggerType(
        "string console logger",
        lambda params, hex_output: params.enable_string_console_logger(),
    ),
    "console-bytes": LoggerType(
        "byte console logger",
        lambda params, hex_output: params.enable_byte_console_logger(hex_output),
    ),
    "file-string": LoggerType(
        "string file logger",
        lambda params, hex_output: params.enable_string_file_logger(params.down_path, params.up_path),
    ),
    "file-bytes": LoggerType(
        "byte file logger",
        lambda params, hex_output: params.enable_byte_file_logger(params.down_path, params.up_path),
    ),
}


def add_logger(params: Params, logger_type: str, hex_output: bool) -> Optional[ParseError]:
    """
    Enable a traffic logger of the given type.

    Args:
        params: Configuration to enable the logger on
        logger_type: Logger type name, e.g. "console-string"
        hex_output: Print bytes as hex in byte console loggers

    Returns:
        Error record if the type is unknown or its files cannot be opened
    """
    entry = LOGGER_TYPES.get(logger_type)
    if entry is None:
        return ParseError(ErrorKind.UNKNOWN, f"Unknown logger type: '{logger_type}'.")

    try:
        entry.enable(params, hex_output)
    except OSError as e:
        reason = str(e).splitlines()[0] if str(e) else type(e).__name__
        return ParseError(ErrorKind.RESOURCE, f"Unable to create {entry.description}: {reason}")
    return None


def parse_options(
    options: List[Option],
    params: Params,
    errors: List[ParseError],
    display: Display
) -> List[ParseError]:
    """
    Apply parsed options to the configuration.

    The first pass applies every option except loggers, which are
    created in a second pass so that paths and the hex flag are known
    regardless of where they appear on the command line. ``--help``
    prints the help, stops the run and discards all errors.

    Args:
        options: Options in command-line order
        params: Configuration to update
        errors: Errors found so far
        display: Where to print the help text

    Returns:
        Errors found so far plus new ones
    """
    errors = list(errors)
    state = OptionState()

    for option in options:
        if option.name == HELP_OPTION:
            display.print_help(help_text())
            params.should_run = False
            return []

        handler = OPTION_HANDLERS.get(option.name)
        if handler is None:
            errors.append(ParseError(ErrorKind.UNKNOWN, f"Invalid option '{option.name}'."))
            continue

        error = handler(option, params, state)
        if error:
            errors.append(error)

    logger_options = [option for option in options if option.name == LOGGER_OPTION]
    if state.logger_count == 0:
        logger_options.append(Option(LOGGER_OPTION, DEFAULT_LOGGER))

    for option in logger_options:
        error = add_logger(params, option.value, state.hex_output)
        if error:
            errors.append(error)

    return errors


def _parse_port(value: str, label: str) -> Tuple[Optional[int], Optional[ParseError]]:
    try:
        port = parse_int(value)
    except ValueError:
        return None, ParseError(ErrorKind.VALUE, f"Unable to parse {label} port from: '{value}'.")

    if port < MIN_PORT or port > MAX_PORT:
        return port, ParseError(
            ErrorKind.VALUE,
            f"Port numbers have to be in range {MIN_PORT}-{MAX_PORT}, {label} port was: {port}."
        )
    return port, None


def parse_params(positionals: List[str], params: Params, errors: List[ParseError]) -> List[ParseError]:
    """
    Parse source port, remote host and remote port.

    A wrong number of parameters is reported without looking at their
    values. Out of range ports are reported but still stored.
    """
    errors = list(errors)

    if len(positionals) < PARAM_COUNT:
        errors.append(ParseError(
            ErrorKind.ARGUMENT_COUNT,
            f"Too few arguments. Need {PARAM_COUNT}, got {len(positionals)}: {positionals}."
        ))
        return errors
    if len(positionals) > PARAM_COUNT:
        errors.append(ParseError(
            ErrorKind.ARGUMENT_COUNT,
            f"Too many arguments. Need {PARAM_COUNT}, got {len(positionals)}: {positionals}."
        ))
        return errors

    source, host, remote = positionals

    source_port, error = _parse_port(source, "source")
    if source_port is not None:
        params.source_port = source_port
    if error:
        errors.append(error)

    params.remote_host = host

    remote_port, error = _parse_port(remote, "remote")
    if remote_port is not None:
        params.remote_port = remote_port
    if error:
        errors.append(error)

    return errors


def parse_args(args: Sequence[str], display: Optional[Display] = None) -> Params:
    """
    Parse command-line arguments into a tunnel configuration.

    Never raises for bad input. Check ``params.errors`` (empty on success)
    and ``params.should_run`` (false after ``--help``) before running.

    Args:
        args: Command-line arguments without the program name
        display: Display used for printing help (default: new Display)

    Returns:
        The parsed configuration
    """
    display = display or Display()
    params = Params()

    options, positionals, errors = tokenize(list(args))
    errors = parse_options(options, params, errors, display)

    if params.should_run:
        errors = parse_params(positionals, params, errors)

    params.set_errors(errors)
    return params


def help_text() -> str:
    """Get the help text shown for --help."""
    return "\n".join([
        "A program for capturing data sent and received between two points. A proxy. A MITM. A whatever.",
        "Nothing fancy, just basic capture of data. No certificate handling etc.",
        "",
        "Usage: tcptunnel [options] <sourceport> <remotehost> <remoteport>",
        "Parameters:",
        "  <sourceport> : The port to bind and wait for connections on localhost.",
        "  <remotehost> : The host to connect to and forward traffic when someone connects to <sourceport>.",
        "  <remoteport> : The port on the <remotehost> to connect to and forward traffic "
        "when someone connects to <sourceport>.",
        "",
        "Options:",
        f"  --buffersize <bytes> : Size of input buffer used to read data in bytes. "
        f"Defaults to {DEFAULT_BUFFER_SIZE} bytes.",
        f"  --encoding <encoding> : Use the given encoding to decode strings. Default is {DEFAULT_ENCODING}.",
        f"  --down <path> : Write remote->local data stream to file in <path>. Default is {DEFAULT_DOWN_PATH}. "
        "Suffix is logger dependent.",
        f"  --up <path> : Write local->remote data stream to file in <path>. Default is {DEFAULT_UP_PATH}. "
        "Suffix is logger dependent.",
        f"  --logger <type> : Add specified type of logger. Can be repeated. Default is '{DEFAULT_LOGGER}'.",
        "  --hex : If using a console-bytes logger, print bytes as hex instead of integers.",
        "  --help : Prints this help and exits.",
        "",
        "Logger types:",
        "  console-string : Prints logged data as strings (in defined encoding). "
        "Upstream to stdout, downstream to stderr.",
        "  console-bytes : Prints logged data as lists of byte values. Upstream to stdout, downstream to stderr.",
        f"  file-string : Writes logged data as strings (in defined encoding) to the output files "
        f"with {STRING_FILE_SUFFIX} ending.",
        f"  file-bytes : Writes logged data as raw bytes to the output files with {BYTES_FILE_SUFFIX} ending.",
    ])
