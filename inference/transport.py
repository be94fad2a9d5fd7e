"""
Blocking HTTP exchange with a backend.

The transport only moves bytes. HTTP error statuses are NOT transport
failures: their bodies usually carry the backend's own error object, which
the normalizer turns into a readable message. Only connection problems,
timeouts and similar raise TransportFailure.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from .errors import TransportFailure

logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    Abstract transport boundary.
    The orchestrator depends ONLY on this interface.
    """

    @abstractmethod
    def send(self, url: str, headers: Dict[str, str], body: str, timeout_s: float) -> bytes:
        """
        POST body to url and return the raw response body.

        Raises:
            TransportFailure: the exchange could not be completed
        """
        raise NotImplementedError


class RequestsTransport(Transport):
    """requests-based transport. One POST per call, no retries."""

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session

    def send(self, url: str, headers: Dict[str, str], body: str, timeout_s: float) -> bytes:
        post = self._session.post if self._session is not None else requests.post
        try:
            resp = post(
                url,
                data=body.encode("utf-8"),
                headers=headers,
                timeout=timeout_s,
            )
        except requests.Timeout as e:
            raise TransportFailure("Network Error: request timed out") from e
        except requests.RequestException as e:
            # Never echo the URL: query-param backends carry the key in it.
            raise TransportFailure(f"Network Error: {type(e).__name__}") from e

        if resp.status_code >= 400:
            logger.info(f"Backend answered HTTP {resp.status_code}")

        return resp.content
