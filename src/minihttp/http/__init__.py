"""
HTTP/1.1 protocol pieces shared by the client and the server.

    url.py           URL -> (host, request_path)
    request.py       request encoding and request-line parsing
    response.py      status-line validation and response encoding
    lines.py         header draining and line-oriented body transfer
    status_codes.py  the status codes the server sends
"""

from .lines import drain_header_block, iter_lines, read_line, transfer_body
from .request import (
    HTTPParseError,
    RequestLine,
    encode_request,
    parse_request_line,
    send_request,
)
from .response import (
    OutcomeKind,
    StatusLine,
    TransferOutcome,
    encode_error_head,
    encode_success_head,
    format_http_date,
    parse_status_line,
    send_head,
    validate_response,
)
from .status_codes import HTTPStatus
from .url import URL, has_http_scheme, parse_url

__all__ = [
    "URL",
    "HTTPStatus",
    "HTTPParseError",
    "OutcomeKind",
    "RequestLine",
    "StatusLine",
    "TransferOutcome",
    "drain_header_block",
    "encode_error_head",
    "encode_request",
    "encode_success_head",
    "format_http_date",
    "has_http_scheme",
    "iter_lines",
    "parse_request_line",
    "parse_status_line",
    "parse_url",
    "read_line",
    "send_head",
    "send_request",
    "transfer_body",
    "validate_response",
]
