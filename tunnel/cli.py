"""
Command-line interface for TCPTunnel.

Parses command-line arguments, reports problems and shows the
resolved tunnel configuration.
"""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from tunnel.args import parse_args
from tunnel.display import Display


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for TCPTunnel CLI.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if argv is None:
        argv = sys.argv[1:]

    display = Display()
    params = parse_args(argv, display)

    try:
        if params.has_errors:
            display.print_errors(params.errors)
            display.print_info("Run with --help for usage.")
            return 1

        if not params.should_run:
            return 0

        display.print_banner(params)
        return 0
    finally:
        params.close_loggers()


if __name__ == "__main__":
    sys.exit(main())
