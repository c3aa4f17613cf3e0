"""
Unit tests for the access log.
"""

import json
import logging
import time

import pytest

from minihttp.logs import RequestLog, access_logger, log_request, setup_logging


class TestRequestLog:

    def test_text_format(self):
        entry = RequestLog(
            client_ip="127.0.0.1",
            request_line="GET /a.txt HTTP/1.1",
            status_code=200,
            content_length=42,
            duration_ms=1.234,
            timestamp="18/Oct/2026:10:00:00 +0000",
        )
        assert entry.to_text() == (
            '127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] '
            '"GET /a.txt HTTP/1.1" 200 42 1.23ms'
        )

    def test_log_request_text(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.INFO, logger="minihttp.access"):
            entry = log_request("10.0.0.1", None, 400, 0, time.time())

        assert entry.request_line == "-"
        assert '"-" 400 0' in caplog.text

    def test_log_request_json(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.INFO, logger="minihttp.access"):
            log_request("10.0.0.1", "GET / HTTP/1.1", 200, 5, time.time(), log_format="json")

        record = json.loads(caplog.records[-1].getMessage())
        assert record["status_code"] == 200
        assert record["request_line"] == "GET / HTTP/1.1"


class TestSetupLogging:

    def test_json_access_lines_are_bare(self, monkeypatch: pytest.MonkeyPatch,
                                        capsys: pytest.CaptureFixture):
        monkeypatch.setattr(access_logger, "handlers", [])
        monkeypatch.setattr(access_logger, "propagate", True)
        monkeypatch.setattr(logging.getLogger("minihttp"), "level", logging.NOTSET)

        setup_logging("INFO", "json")
        log_request("10.0.0.1", "GET / HTTP/1.1", 200, 5, time.time(), log_format="json")

        line = capsys.readouterr().err.strip()
        assert json.loads(line)["client_ip"] == "10.0.0.1"
        assert access_logger.propagate is False
