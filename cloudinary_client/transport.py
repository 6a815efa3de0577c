"""
HTTP transport used by the client.

The client only needs "POST a multipart body, get the response text back";
anything implementing Transport can be passed to CloudinaryClient.
"""

import logging
from typing import Iterable, Protocol

import requests

from .exceptions import TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def post(self, url: str, body: Iterable[bytes], content_type: str) -> str:
        ...

    def close(self) -> None:
        ...


class RequestsTransport:
    """Transport backed by a requests.Session."""

    def __init__(self, timeout: float = 60, session: requests.Session = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def post(self, url: str, body: Iterable[bytes], content_type: str) -> str:
        """
        POST a streamed body.

        The body iterator is sent with chunked transfer encoding, so the
        file is never held in memory. The response status is not checked:
        Cloudinary reports errors in the body, which the decoder handles.

        Raises:
            TransportError: If the request fails before a response is read
        """
        try:
            response = self.session.post(
                url,
                data=iter(body),
                headers={'Content-Type': content_type},
                timeout=self.timeout,
            )
            logger.debug("POST %s -> %s", url, response.status_code)
            return response.text
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()
