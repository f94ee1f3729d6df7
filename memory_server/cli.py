"""
Command-line entry point.

    memory-server                 # HTTP on $PORT (default 3000)
    memory-server stdio           # JSON-RPC over stdin/stdout
    memory-server http --port 8080 --log-level debug
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import ConfigError, Settings, parse_log_level, parse_port


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="memory-server",
        description="Volatile memory store exposed as JSON-RPC tools",
    )
    ap.add_argument("transport", nargs="?", choices=["http", "stdio"], default="http",
                    help="transport to serve (default: http)")
    ap.add_argument("--port", help="HTTP listen port (overrides PORT)")
    ap.add_argument("--host", help="HTTP bind address (overrides HOST)")
    ap.add_argument("--log-level", help="error|warn|info|debug (overrides LOG_LEVEL)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Environment first, then explicit flags."""
    settings = Settings.from_env()
    if args.port is not None:
        settings.port = parse_port(args.port)
    if args.host:
        settings.host = args.host
    if args.log_level:
        settings.log_level = parse_log_level(args.log_level)
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        parser.error(str(e))

    if args.transport == "stdio":
        from .stdio import main as run_stdio
        run_stdio(settings)
    else:
        from .server import main as run_http
        run_http(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
