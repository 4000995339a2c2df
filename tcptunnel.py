#!/usr/bin/env python
"""
TCPTunnel - Capture data sent and received between two points

A proxy that listens on a local port, forwards traffic to a remote
host and port, and logs the bytes that flow each way.

Usage:
    python tcptunnel.py [OPTIONS] <sourceport> <remotehost> <remoteport>

Examples:
    python tcptunnel.py 8080 localhost 9090
    python tcptunnel.py --logger console-bytes --hex 8080 example.com 80
    python tcptunnel.py --logger file-string --down down --up up 8080 example.com 80

Requirements:
    - Python 3.9+
    - pip install -e .
"""

import sys

from tunnel.cli import main

if __name__ == "__main__":
    sys.exit(main())
