"""
HTTP transport

POSTs JSON-RPC 2.0 request text to an HTTP endpoint and returns the body of
the reply.
"""

import logging
from typing import Dict, Optional

import requests

from jsonrpc_invoker.transport.interface import ClientTransportInterface

logger = logging.getLogger(__name__)


class HttpTransport(ClientTransportInterface):
    """HTTP POST transport backed by a requests.Session"""

    def __init__(self,
                 url: str,
                 timeout_ms: int = 5000,
                 headers: Optional[Dict[str, str]] = None):
        """Initialize HTTP transport

        Args:
            url: JSON-RPC endpoint URL
            timeout_ms: Request timeout in milliseconds
            headers: Extra HTTP headers sent with every request
        """
        self.url = url
        self.timeout_ms = timeout_ms
        self.session = requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        if headers:
            self.session.headers.update(headers)
        logger.info(f"HTTP transport targeting {url}")

    def call(self, request: str) -> str:
        """POST request text and return the response body

        Raises:
            requests.HTTPError: The server answered with an error status
            requests.RequestException: Connection failure or timeout
        """
        response = self.session.post(
            self.url,
            data=request.encode('utf-8'),
            timeout=self.timeout_ms / 1000.0)
        response.raise_for_status()
        return response.text

    def close(self):
        self.session.close()
