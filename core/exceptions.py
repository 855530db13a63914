"""Error types raised by the CCU XML-API client.

There are three kinds of failure:
- ValidationError: bad arguments, raised before any request is sent
- TransportError / HTTPStatusError: the request itself failed
- DecodeError and subclasses: the response could not be turned into records
"""


class CCUError(Exception):
    """Base class for all client errors."""


class ValidationError(CCUError, ValueError):
    """Invalid arguments (e.g. parallel lists of different length)."""


class TransportError(CCUError):
    """Connection failure, timeout or unreadable response."""


class HTTPStatusError(TransportError):
    """The XML-API answered with a status other than 200."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"HTTP error: {status_code}")
        self.status_code = status_code
        self.url = url


class DecodeError(CCUError):
    """Malformed XML, unexpected root element or bad attribute value."""


class UnsupportedCharsetError(DecodeError):
    """The XML declaration names a charset the decoder cannot read."""

    def __init__(self, charset: str):
        super().__init__(f"unsupported charset: {charset}")
        self.charset = charset


class RecordNotFoundError(DecodeError):
    """A single record was expected but the response contained none."""
