"""
Blocking HTTP client for a JSON upstream API
"""

from typing import Any, Optional

import requests

from app.errors import UpstreamError, UpstreamThrottled, UpstreamTimeout
from app.utils import get_http_session

HTTP_TOO_MANY_REQUESTS = 429


class UpstreamClient:
    """Issues ``GET {base_url}{endpoint_key}`` and maps failures to proxy errors"""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = get_http_session()
        return self._session

    def url_for(self, endpoint_key: str) -> str:
        return f"{self.base_url}{endpoint_key}"

    def get(self, endpoint_key: str) -> Any:
        try:
            response = self.session.get(
                self.url_for(endpoint_key),
                headers={"Accept": "application/json", "Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise UpstreamTimeout(
                f"timeout of {self.timeout}s exceeded: {e}", endpoint=endpoint_key
            ) from e
        except requests.RequestException as e:
            raise UpstreamError(str(e), endpoint=endpoint_key) from e

        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            raise UpstreamThrottled(
                "Request failed with status code 429", endpoint=endpoint_key
            )
        if not response.ok:
            raise UpstreamError(
                f"Request failed with status code {response.status_code}",
                status=response.status_code,
                endpoint=endpoint_key,
            )

        try:
            return response.json()
        except ValueError:
            # Non-JSON bodies are forwarded as text
            return response.text
