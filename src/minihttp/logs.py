"""
=============================================================================
LOGGING
=============================================================================

Two kinds of log output:

    minihttp.*        diagnostic logs (one logger per module)
    minihttp.access   one line per served connection

Access log entries are structured (a dataclass) and rendered either as
a common-log style text line or as JSON for log aggregators:

    text:  127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /a.txt HTTP/1.1" 200 1234 0.42ms
    json:  {"client_ip": "127.0.0.1", "request_line": "GET /a.txt HTTP/1.1", ...}

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Optional


access_logger = logging.getLogger("minihttp.access")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """
    Configure the root logger and the ``minihttp`` logger level.

    With ``log_format="json"`` the access log gets its own handler that
    writes the bare message, so each access line is a JSON document.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    logging.getLogger("minihttp").setLevel(numeric_level)

    if log_format == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        access_logger.handlers = [handler]
        access_logger.propagate = False


@dataclass
class RequestLog:
    """
    Access log entry for one connection.

    request_line:   the request line as received ("-" if none was read)
    status_code:    status sent to the client
    content_length: body bytes sent
    duration_ms:    time from accept to last byte flushed
    """

    client_ip: str
    request_line: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.request_line}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(
    client_ip: str,
    request_line: Optional[str],
    status_code: int,
    content_length: int,
    started_at: float,
    log_format: str = "text",
) -> RequestLog:
    """
    Build and emit an access log entry.

    Args:
        started_at: ``time.time()`` when the connection was accepted.
        log_format: "text" or "json".
    """
    entry = RequestLog(
        client_ip=client_ip,
        request_line=request_line or "-",
        status_code=status_code,
        content_length=content_length,
        duration_ms=(time.time() - started_at) * 1000,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S +0000", time.gmtime()),
    )

    if log_format == "json":
        access_logger.info(json.dumps(entry.to_dict()))
    else:
        access_logger.info(entry.to_text())

    return entry
