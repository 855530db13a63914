"""HTTP transport for the CCU XML-API add-on.

One GET per call against ``<base_url>/addons/xmlapi/<endpoint>.cgi`` with
the session id attached as the ``sid`` query parameter. There is no retry:
a connection failure or any status other than 200 ends the call.
"""

import logging

import requests
from requests.packages.urllib3.exceptions import InsecureRequestWarning

from core.exceptions import HTTPStatusError, TransportError

logger = logging.getLogger(__name__)

API_PATH = '/addons/xmlapi'
TOKEN_PARAM = 'sid'
DEFAULT_TIMEOUT = 30

# Disable SSL warnings for self-signed certificate
requests.packages.urllib3.disable_warnings(InsecureRequestWarning)


class Transport:
    """Issues authenticated GET requests and returns raw response bodies."""

    def __init__(self, base_url: str, token: str, session: requests.Session | None = None,
                 timeout: float = DEFAULT_TIMEOUT, verify_tls: bool | None = None):
        """Initialise the transport.

        Args:
            base_url: Scheme and host of the CCU, e.g. ``https://192.168.1.100``
            token: XML-API security token, sent as ``sid`` on every request
            session: HTTP session to use (a new one is created if omitted)
            timeout: Client-wide request timeout in seconds
            verify_tls: Verify the CCU certificate. None leaves a passed-in session
                as configured and turns verification off on a new one (the CCU is
                self-signed)
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.verify = bool(verify_tls)
        elif verify_tls is not None:
            session.verify = verify_tls
        self.session = session

    def build_url(self, endpoint: str) -> str:
        if not endpoint.endswith('.cgi'):
            endpoint = f"{endpoint}.cgi"
        return f"{self.base_url}{API_PATH}/{endpoint}"

    def build_params(self, params: dict[str, str] | None = None) -> dict[str, str]:
        """Query parameters for a request; caller values override the token."""
        query = {TOKEN_PARAM: self.token}
        if params:
            query.update(params)
        return query

    def get(self, endpoint: str, params: dict[str, str] | None = None) -> bytes:
        """Fetch an endpoint and return the raw body.

        Raises:
            TransportError: On connection failure or timeout
            HTTPStatusError: If the response status is not 200
        """
        url = self.build_url(endpoint)
        logger.debug("GET %s params=%s", url, sorted((params or {}).keys()))

        try:
            response = self.session.get(url, params=self.build_params(params), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        logger.debug("%s -> %s (%d bytes)", url, response.status_code, len(response.content))
        if response.status_code != 200:
            raise HTTPStatusError(response.status_code, url)

        return response.content

    def close(self):
        self.session.close()
