"""
HTTP transport used by the AI client.

The client only needs one operation (a JSON POST), so the transport is a
single-method interface; tests replace it with an in-memory fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import requests

from archdecide.core.exceptions import TransportError
from archdecide.core.logging import logger

MAX_CONNECT_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class HttpResponse:
    """Raw HTTP response: status code and decoded body."""

    status_code: int
    body: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class HttpClient(ABC):
    """Minimal POST-only HTTP transport."""

    @abstractmethod
    def post(
        self,
        url: str,
        headers: Sequence[str],
        body: str,
        timeout_seconds: int,
        ca_info_path: Optional[str] = None,
    ) -> HttpResponse:
        """
        Send ``body`` to ``url``.

        Args:
            headers: "Name: Value" strings, sent in order
            timeout_seconds: total timeout for the request
            ca_info_path: custom CA bundle used to verify the server certificate

        Raises:
            TransportError: on network-level failure (DNS, refused, TLS, timeout)
        """


class RequestsHttpClient(HttpClient):
    """
    Production transport on top of ``requests``.

    Certificate verification is always on; ``ca_info_path`` only replaces
    the trust store used for it. Redirects are not followed, so a 3xx is
    reported to the caller as a non-2xx response.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session or requests.Session()

    def post(
        self,
        url: str,
        headers: Sequence[str],
        body: str,
        timeout_seconds: int,
        ca_info_path: Optional[str] = None,
    ) -> HttpResponse:
        timeout = max(1, timeout_seconds)
        connect_timeout = max(1, min(MAX_CONNECT_TIMEOUT_SECONDS, timeout))

        try:
            response = self._session.post(
                url,
                data=body.encode("utf-8"),
                headers=self._header_dict(headers),
                timeout=(connect_timeout, timeout),
                verify=ca_info_path or True,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            error_code = type(e).__name__
            logger.warning("AI transport failure", url=url, error_code=error_code)
            error = TransportError(
                f"AI request failed ({error_code}): {e}",
                error_code=error_code,
                context={"url": url},
                cause=e,
            )
            if isinstance(e, requests.exceptions.SSLError):
                error.add_suggestion(
                    "Set ARCHDECIDE_AI_CAINFO (or CURL_CA_BUNDLE) to a CA bundle path"
                )
            raise error from e
        except OSError as e:
            # Raised by requests when the CA bundle path does not exist
            error_code = type(e).__name__
            raise TransportError(
                f"AI request failed ({error_code}): {e}",
                error_code=error_code,
                context={"url": url, "ca_info_path": ca_info_path},
                cause=e,
            ) from e

        return HttpResponse(
            status_code=response.status_code,
            body=response.content.decode("utf-8", errors="replace"),
        )

    @staticmethod
    def _header_dict(headers: Sequence[str]) -> Dict[str, str]:
        parsed: Dict[str, str] = {}
        for header in headers:
            name, _, value = header.partition(":")
            parsed[name.strip()] = value.strip()
        return parsed
