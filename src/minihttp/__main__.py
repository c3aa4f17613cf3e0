"""
=============================================================================
COMMAND-LINE ENTRY POINTS
=============================================================================

    # Fetch a page to stdout
    minihttp-client http://localhost/index.html -p 8080

    # Save into a file or a directory
    minihttp-client -o page.html http://example.com/
    minihttp-client -d ./downloads http://example.com/docs/a.txt

    # Serve a directory
    minihttp-server -p 8080 -i index.html ./public

    # Same, as a module
    python -m minihttp client http://localhost/ -p 8080
    python -m minihttp server ./public

=============================================================================
EXIT STATUS
=============================================================================

    0   success
    1   usage, input, transport or local I/O error
    2   protocol error (malformed status line)
    3   the server answered with a status other than 200

=============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .client import HTTPClient
from .config import ClientConfig, ServerConfig, resolve_port
from .errors import ExitStatus, MiniHTTPError, RejectedResponse
from .logs import setup_logging
from .server import HTTPServer


logger = logging.getLogger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """argparse with usage errors mapped to exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(ExitStatus.FAILURE, f"{self.prog}: error: {message}\n")


def build_client_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog=prog,
        description="Fetch a single URL with HTTP/1.1 GET",
    )
    parser.add_argument(
        "--port", "-p",
        default="http",
        help="Port number or service name (default: http)",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--output", "-o",
        metavar="FILE",
        default=None,
        help="Write the body to FILE instead of stdout",
    )
    output.add_argument(
        "--dir", "-d",
        metavar="DIR",
        default=None,
        help="Write the body into DIR, named after the last path segment",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--version", "-v", action="version", version=f"minihttp {__version__}")
    parser.add_argument("url", metavar="URL", help="http://host[/path]")
    return parser


def build_server_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog=prog,
        description="Serve files from DOC_ROOT, one connection at a time",
    )
    parser.add_argument(
        "--port", "-p",
        default=None,
        help="Port number or service name (default: 8080)",
    )
    parser.add_argument(
        "--index", "-i",
        metavar="INDEX",
        default=None,
        help="File served for targets ending in / (default: index.html)",
    )
    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)",
    )
    parser.add_argument("--version", "-v", action="version", version=f"minihttp {__version__}")
    parser.add_argument("document_root", metavar="DOC_ROOT", help="Directory to serve")
    return parser


def _report(prog: str, error: MiniHTTPError) -> int:
    print(f"{prog}: {error}", file=sys.stderr)
    return error.exit_status


def client_main(argv: Optional[List[str]] = None, prog: Optional[str] = None) -> int:
    """Run the client. Returns the process exit status."""
    parser = build_client_parser(prog)
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = ClientConfig(
            port=resolve_port(args.port),
            output_file=args.output,
            output_dir=args.dir,
            log_level=args.log_level,
        )
        HTTPClient(config).fetch(args.url)
    except RejectedResponse as e:
        print(f"{e.code} {e.reason}", file=sys.stderr)
        return e.exit_status
    except MiniHTTPError as e:
        return _report(parser.prog, e)

    return ExitStatus.SUCCESS


def server_main(argv: Optional[List[str]] = None, prog: Optional[str] = None) -> int:
    """Run the server until SIGINT/SIGTERM. Returns the process exit status."""
    parser = build_server_parser(prog)
    args = parser.parse_args(argv)

    try:
        config = ServerConfig.from_env(
            host=args.host,
            port=resolve_port(args.port) if args.port is not None else None,
            document_root=args.document_root,
            index_filename=args.index,
            log_level=args.log_level,
            log_format=args.log_format,
        )
        setup_logging(config.log_level, config.log_format)
        HTTPServer(config).run()
    except MiniHTTPError as e:
        return _report(parser.prog, e)

    return ExitStatus.SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """``python -m minihttp {client,server} ...``"""
    argv = sys.argv[1:] if argv is None else argv
    commands = {"client": client_main, "server": server_main}

    if not argv or argv[0] not in commands:
        print("usage: python -m minihttp {client,server} [options]", file=sys.stderr)
        return ExitStatus.FAILURE

    command, rest = argv[0], argv[1:]
    return commands[command](rest, prog=f"minihttp {command}")


def run_client() -> None:
    """Console script: minihttp-client."""
    sys.exit(client_main())


def run_server() -> None:
    """Console script: minihttp-server."""
    sys.exit(server_main())


if __name__ == "__main__":
    sys.exit(main())
