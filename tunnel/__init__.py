"""
TCPTunnel - Capture data flowing between a local port and a remote host.

Command-line front end for a capturing TCP tunnel: parses the command
line into a validated configuration and selects the traffic loggers
used to record upstream and downstream data.
"""

__version__ = "1.0.0"
__author__ = "TCPTunnel Contributors"
__license__ = "MIT"

from tunnel.args import parse_args, help_text
from tunnel.params import Params, ParseError, ErrorKind
from tunnel.display import Display

__all__ = [
    "parse_args",
    "help_text",
    "Params",
    "ParseError",
    "ErrorKind",
    "Display",
    "__version__",
]
