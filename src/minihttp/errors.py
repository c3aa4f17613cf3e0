"""
=============================================================================
ERROR VOCABULARY
=============================================================================

Every failure the two programs can report, grouped by who has to deal
with it:

    ┌──────────────────┬───────────────────────────────┬──────────────────┐
    │ Exception        │ Raised when                   │ Client exit      │
    ├──────────────────┼───────────────────────────────┼──────────────────┤
    │ InputError       │ bad URL, CLI value, doc root  │ 1                │
    │ TransportError   │ connect/bind/accept/write     │ 1                │
    │ LocalIOError     │ output file, seek, clock      │ 1                │
    │ ProtocolError    │ malformed status line         │ 2                │
    │ RejectedResponse │ status code other than 200    │ 3                │
    └──────────────────┴───────────────────────────────┴──────────────────┘

"Not found" and "wrong method" are NOT exceptions on the server side.
They are ordinary outcomes answered with 404/501 (see
handlers/static.py).
=============================================================================
"""

from enum import IntEnum
from typing import Optional


class ExitStatus(IntEnum):
    """Process exit codes shared by the client and server programs."""

    SUCCESS = 0
    FAILURE = 1
    PROTOCOL_ERROR = 2
    REJECTED_RESPONSE = 3


class MiniHTTPError(Exception):
    """Base class for all errors reported to the operator."""

    exit_status = ExitStatus.FAILURE


class InputError(MiniHTTPError):
    """Invalid input detected before any network activity."""


class TransportError(MiniHTTPError):
    """
    A socket operation failed.

    Wraps the underlying OSError so the operator sees the system reason.
    """

    def __init__(self, message: str, cause: Optional[OSError] = None):
        if cause is not None:
            message = f"{message}: {cause.strerror or cause}"
        super().__init__(message)
        self.cause = cause


class LocalIOError(MiniHTTPError):
    """A local resource (output file, seek, clock) failed."""


class ProtocolError(MiniHTTPError):
    """The peer sent something that is not a valid HTTP/1.1 message."""

    exit_status = ExitStatus.PROTOCOL_ERROR


class RejectedResponse(MiniHTTPError):
    """
    The server answered with a well-formed status line other than 200.

    Carries the numeric code and the reason phrase exactly as received.
    """

    exit_status = ExitStatus.REJECTED_RESPONSE

    def __init__(self, code: int, reason: str):
        super().__init__(f"{code} {reason}")
        self.code = code
        self.reason = reason
