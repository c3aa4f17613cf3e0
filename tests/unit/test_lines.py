"""
Unit tests for header draining and body transfer.
"""

import io

from minihttp.http.lines import drain_header_block, iter_lines, read_line, transfer_body


class TestDrainHeaderBlock:

    def test_counts_terminator(self):
        stream = io.BytesIO(b"Host: x\r\nConnection: close\r\n\r\nrest")
        assert drain_header_block(stream) == 3
        assert stream.read() == b"rest"

    def test_immediate_terminator(self):
        stream = io.BytesIO(b"\r\nrest")
        assert drain_header_block(stream) == 1
        assert stream.read() == b"rest"

    def test_end_of_stream(self):
        stream = io.BytesIO(b"Host: x\r\n")
        assert drain_header_block(stream) == 1
        assert read_line(stream) == b""


class TestTransferBody:

    def test_copies_bytes_unchanged(self):
        payload = b"a\nb\r\n\r\n\x00\xff binary\nno trailing newline"
        destination = io.BytesIO()

        written = transfer_body(io.BytesIO(payload), destination)

        assert written == len(payload)
        assert destination.getvalue() == payload

    def test_empty_source(self):
        destination = io.BytesIO()
        assert transfer_body(io.BytesIO(b""), destination) == 0
        assert destination.getvalue() == b""

    def test_long_line_is_not_split(self):
        payload = b"x" * 100_000 + b"\n"
        assert list(iter_lines(io.BytesIO(payload))) == [payload]

    def test_flushes_destination(self):
        raw = io.BytesIO()
        destination = io.BufferedWriter(raw)
        transfer_body(io.BytesIO(b"data\n"), destination)
        assert raw.getvalue() == b"data\n"
