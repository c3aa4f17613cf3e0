"""
=============================================================================
HTTP RESPONSE: VALIDATION (CLIENT) AND ENCODING (SERVER)
=============================================================================

Two response shapes exist on the wire.

SUCCESS:
────────

    HTTP/1.1 200 OK\\r\\n
    Date: Sun, 18 Oct 2026 10:00:00 GMT\\r\\n
    Content-Length: 1234\\r\\n
    Connection: close\\r\\n
    \\r\\n
    <raw file bytes until the server closes>

ERROR:
──────

    HTTP/1.1 404 Not Found\\r\\n
    <connection closed, no headers, no body>

=============================================================================
CLIENT VALIDATION ORDER
=============================================================================

    status line ──► version == "HTTP/1.1" ? ──no──► ProtocolError
                         │ yes
                         ▼
                    code is an integer?    ──no──► ProtocolError
                         │ yes
                         ▼
                    code == 200 ?          ──no──► RejectedResponse(code, reason)
                         │ yes                     (nothing else is read)
                         ▼
                    drain header block ──► stream sits on first body byte

=============================================================================
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import BinaryIO, Optional

from ..errors import LocalIOError, ProtocolError, RejectedResponse
from .lines import drain_header_block, read_line
from .request import HTTP_VERSION
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


# =============================================================================
# CLIENT SIDE
# =============================================================================

@dataclass
class StatusLine:
    """The first line of a response."""

    version: str
    code: int
    reason: str

    @property
    def is_ok(self) -> bool:
        return self.code == HTTPStatus.OK


def parse_status_line(raw: bytes) -> StatusLine:
    """
    Split and check a status line.

    Only the first two spaces separate tokens; the reason phrase keeps
    any spaces of its own.

    Raises:
        ProtocolError: Empty line, wrong version token, missing or
            non-numeric status code.
    """
    if not raw:
        raise ProtocolError("Protocol error! (no status line received)")

    line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
    tokens = line.split(" ", 2)

    if tokens[0] != HTTP_VERSION:
        raise ProtocolError(f"Protocol error! (unexpected version {tokens[0]!r})")

    if len(tokens) < 2:
        raise ProtocolError(f"Protocol error! (missing status code in {line!r})")

    code = tokens[1]
    # str.isdigit() alone accepts non-ASCII digits such as "²"
    if not (code.isascii() and code.isdigit()):
        raise ProtocolError(f"Protocol error! (non-numeric status code {code!r})")

    reason = tokens[2] if len(tokens) == 3 else ""
    return StatusLine(version=tokens[0], code=int(code), reason=reason)


def validate_response(stream: BinaryIO) -> StatusLine:
    """
    Read and accept a response head from ``stream``.

    On success the header block has been consumed and the next read
    returns body bytes.

    Raises:
        ProtocolError: The status line is malformed.
        RejectedResponse: The status code is not 200. Only the status
            line has been read.
    """
    status = parse_status_line(read_line(stream))
    logger.debug(f"Status line: {status.code} {status.reason}")

    if not status.is_ok:
        raise RejectedResponse(status.code, status.reason)

    drain_header_block(stream)
    return status


# =============================================================================
# SERVER SIDE
# =============================================================================

class OutcomeKind(Enum):
    """How a request ended, decided before any body byte is sent."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"


@dataclass
class TransferOutcome:
    """
    The server's verdict on one request.

    For SUCCESS, ``file`` is open at offset 0 and ``size`` is its length
    in bytes. The caller owns the file and must close it.
    """

    kind: OutcomeKind
    status: HTTPStatus
    file: Optional[BinaryIO] = None
    size: int = 0

    @classmethod
    def success(cls, file: BinaryIO, size: int) -> "TransferOutcome":
        return cls(OutcomeKind.SUCCESS, HTTPStatus.OK, file=file, size=size)

    @classmethod
    def error(cls, status: HTTPStatus) -> "TransferOutcome":
        kind = OutcomeKind.SERVER_ERROR if status.is_server_error else OutcomeKind.CLIENT_ERROR
        return cls(kind, status)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def close(self) -> None:
        """Close the opened file, if any."""
        if self.file is not None:
            self.file.close()
            self.file = None


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231 IMF-fixdate).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Sun, 18 Oct 2026 10:00:00 GMT

    HTTP dates are always in GMT. Naive datetimes are taken as UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def current_http_date() -> str:
    """
    The Date header value for "now".

    Raises:
        LocalIOError: The clock cannot be read or converted. The server
            treats this as fatal.
    """
    try:
        return format_http_date(datetime.now(timezone.utc))
    except (OSError, OverflowError, ValueError) as e:
        raise LocalIOError(f"cannot format current date: {e}") from e


def encode_success_head(size: int, now: Optional[datetime] = None) -> bytes:
    """
    Status line and headers for a 200 response.

    Args:
        size: Body length in bytes.
        now: Moment stamped into the Date header; defaults to the current time.
    """
    date = current_http_date() if now is None else format_http_date(now)

    return (
        f"{HTTP_VERSION} {HTTPStatus.OK.value} {HTTPStatus.OK.phrase}\r\n"
        f"Date: {date}\r\n"
        f"Content-Length: {size}\r\n"
        f"Connection: close\r\n"
        f"\r\n"
    ).encode("ascii")


def encode_error_head(status: HTTPStatus) -> bytes:
    """The single status line sent for an error outcome."""
    return f"{HTTP_VERSION} {status.value} {status.phrase}\r\n".encode("ascii")


def send_head(stream: BinaryIO, outcome: TransferOutcome) -> None:
    """
    Write the response head for ``outcome`` and flush.

    Socket failures propagate as OSError; the caller decides whether
    they are fatal.
    """
    if outcome.is_success:
        stream.write(encode_success_head(outcome.size))
    else:
        stream.write(encode_error_head(outcome.status))
    stream.flush()
