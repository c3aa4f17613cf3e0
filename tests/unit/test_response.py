"""
Unit tests for response validation (client) and encoding (server).
"""

import io
from datetime import datetime, timedelta, timezone

import pytest

from minihttp.errors import ExitStatus, ProtocolError, RejectedResponse
from minihttp.http.response import (
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
from minihttp.http.status_codes import HTTPStatus


class TestParseStatusLine:
    """Tests for parse_status_line()."""

    def test_ok(self):
        status = parse_status_line(b"HTTP/1.1 200 OK\r\n")
        assert status == StatusLine("HTTP/1.1", 200, "OK")
        assert status.is_ok

    def test_reason_keeps_spaces(self):
        status = parse_status_line(b"HTTP/1.1 404 Not Found Here\r\n")
        assert status.code == 404
        assert status.reason == "Not Found Here"

    def test_missing_reason(self):
        status = parse_status_line(b"HTTP/1.1 200\r\n")
        assert status.code == 200
        assert status.reason == ""

    def test_empty_line(self):
        with pytest.raises(ProtocolError):
            parse_status_line(b"")

    @pytest.mark.parametrize("raw", [
        b"HTTP/1.0 200 OK\r\n",
        b"HTTP/2 200 OK\r\n",
        b"http/1.1 200 OK\r\n",
        b"\r\n",
        b"garbage\r\n",
    ])
    def test_wrong_version(self, raw: bytes):
        with pytest.raises(ProtocolError):
            parse_status_line(raw)

    @pytest.mark.parametrize("raw", [
        b"HTTP/1.1 abc OK\r\n",
        b"HTTP/1.1  200 OK\r\n",
        b"HTTP/1.1 +200 OK\r\n",
        b"HTTP/1.1 2.0 OK\r\n",
        "HTTP/1.1 ²00 OK\r\n".encode("utf-8"),
        b"HTTP/1.1\r\n",
    ])
    def test_bad_status_code(self, raw: bytes):
        with pytest.raises(ProtocolError) as exc_info:
            parse_status_line(raw)
        assert exc_info.value.exit_status == ExitStatus.PROTOCOL_ERROR


class TestValidateResponse:
    """Tests for validate_response() stream positioning."""

    def test_leaves_stream_at_body(self, sample_response: bytes):
        stream = io.BytesIO(sample_response)

        status = validate_response(stream)

        assert status.code == 200
        assert stream.read() == b"first\nsecond"

    def test_no_headers(self):
        stream = io.BytesIO(b"HTTP/1.1 200 OK\r\n\r\nbody")
        validate_response(stream)
        assert stream.read() == b"body"

    def test_only_bare_crlf_ends_headers(self):
        stream = io.BytesIO(
            b"HTTP/1.1 200 OK\r\n"
            b"X: y\r\n"
            b"\n"
            b" \r\n"
            b"\r\n"
            b"body\r\n"
        )
        validate_response(stream)
        assert stream.read() == b"body\r\n"

    def test_body_that_looks_like_headers_is_untouched(self):
        stream = io.BytesIO(b"HTTP/1.1 200 OK\r\n\r\n\r\nHTTP/1.1 500 X\r\n")
        validate_response(stream)
        assert stream.read() == b"\r\nHTTP/1.1 500 X\r\n"

    def test_rejected_reads_only_status_line(self):
        stream = io.BytesIO(b"HTTP/1.1 404 Not Found\r\nX: y\r\n\r\nbody")

        with pytest.raises(RejectedResponse) as exc_info:
            validate_response(stream)

        assert exc_info.value.code == 404
        assert exc_info.value.reason == "Not Found"
        assert exc_info.value.exit_status == ExitStatus.REJECTED_RESPONSE
        assert stream.read() == b"X: y\r\n\r\nbody"

    def test_non_200_success_is_rejected(self):
        with pytest.raises(RejectedResponse) as exc_info:
            validate_response(io.BytesIO(b"HTTP/1.1 204 No Content\r\n\r\n"))
        assert exc_info.value.code == 204

    def test_truncated_headers(self):
        stream = io.BytesIO(b"HTTP/1.1 200 OK\r\nDate: x\r\n")
        validate_response(stream)
        assert stream.read() == b""


class TestEncoders:
    """Tests for the server's response encoder."""

    def test_success_head(self):
        head = encode_success_head(1234, now=datetime(2026, 10, 18, 10, 0, 0, tzinfo=timezone.utc))
        assert head == (
            b"HTTP/1.1 200 OK\r\n"
            b"Date: Sun, 18 Oct 2026 10:00:00 GMT\r\n"
            b"Content-Length: 1234\r\n"
            b"Connection: close\r\n"
            b"\r\n"
        )

    def test_success_head_local_time_is_converted(self):
        cest = timezone(timedelta(hours=2))
        head = encode_success_head(7, now=datetime(2026, 10, 18, 12, 0, 0, tzinfo=cest))
        assert b"Date: Sun, 18 Oct 2026 10:00:00 GMT\r\n" in head

    def test_success_head_current_date(self):
        head = encode_success_head(0).decode("ascii")
        date_line = head.split("\r\n")[1]
        assert date_line.startswith("Date: ")
        assert date_line.endswith(" GMT")

    @pytest.mark.parametrize("status, expected", [
        (HTTPStatus.BAD_REQUEST, b"HTTP/1.1 400 Bad Request\r\n"),
        (HTTPStatus.NOT_FOUND, b"HTTP/1.1 404 Not Found\r\n"),
        (HTTPStatus.NOT_IMPLEMENTED, b"HTTP/1.1 501 Not Implemented\r\n"),
    ])
    def test_error_head(self, status: HTTPStatus, expected: bytes):
        assert encode_error_head(status) == expected

    def test_send_head_error_has_no_headers(self):
        stream = io.BytesIO()
        send_head(stream, TransferOutcome.error(HTTPStatus.NOT_FOUND))
        assert stream.getvalue() == b"HTTP/1.1 404 Not Found\r\n"

    def test_send_head_success_round_trips(self):
        stream = io.BytesIO()
        send_head(stream, TransferOutcome.success(io.BytesIO(b"abc"), 3))

        stream.seek(0)
        status = validate_response(stream)
        assert status.code == 200
        assert b"Content-Length: 3\r\n" in stream.getvalue()


class TestTransferOutcome:
    """Tests for TransferOutcome."""

    def test_kinds(self):
        assert TransferOutcome.success(io.BytesIO(), 0).kind is OutcomeKind.SUCCESS
        assert TransferOutcome.error(HTTPStatus.NOT_FOUND).kind is OutcomeKind.CLIENT_ERROR
        assert TransferOutcome.error(HTTPStatus.NOT_IMPLEMENTED).kind is OutcomeKind.SERVER_ERROR

    def test_internal_server_error_is_server_kind(self):
        outcome = TransferOutcome.error(HTTPStatus.INTERNAL_SERVER_ERROR)

        assert outcome.kind is OutcomeKind.SERVER_ERROR
        assert encode_error_head(outcome.status) == b"HTTP/1.1 500 Internal Server Error\r\n"

    def test_close_releases_file(self):
        file = io.BytesIO(b"x")
        outcome = TransferOutcome.success(file, 1)
        outcome.close()
        assert file.closed
        assert outcome.file is None
        outcome.close()


class TestFormatHTTPDate:
    """Tests for HTTP date formatting."""

    def test_format(self):
        dt = datetime(2026, 1, 15, 12, 30, 45, tzinfo=timezone.utc)
        assert format_http_date(dt) == "Thu, 15 Jan 2026 12:30:45 GMT"

    def test_converts_to_gmt(self):
        dt = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_http_date(dt) == "Sun, 18 Oct 2026 10:00:00 GMT"

    def test_no_trailing_space(self):
        dt = datetime(2026, 10, 18, 10, 0, 0)
        assert not format_http_date(dt).endswith(" ")
