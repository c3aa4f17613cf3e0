"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server ever sends.

    ┌────────┬────────────────────────┬─────────────────────────────────────┐
    │  Code  │ Phrase                 │ Sent when                           │
    ├────────┼────────────────────────┼─────────────────────────────────────┤
    │  200   │ OK                     │ target opened, request well formed  │
    │  400   │ Bad Request            │ wrong space count or version token  │
    │  404   │ Not Found              │ target cannot be opened             │
    │  501   │ Not Implemented        │ any method other than GET           │
    ├────────┼────────────────────────┼─────────────────────────────────────┤
    │  500   │ Internal Server Error  │ never; kept so 5xx outcomes have a  │
    │        │                        │ named member besides 501            │
    └────────┴────────────────────────┴─────────────────────────────────────┘

The client accepts only 200. Any other numeric code is reported back
to the operator with whatever reason phrase the server chose, so the
client never needs this table to interpret a response.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
}
