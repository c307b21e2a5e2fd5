"""
Exception types raised by the Jikan proxy and the episode source lookup
"""

from typing import Any, Dict, Optional


class ProxyError(Exception):
    """Base error delivered to callers of the proxy"""

    default_status = 500
    error = "Failed to fetch anime data"

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        endpoint: Optional[str] = None,
        error: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status or self.default_status
        self.endpoint = endpoint
        if error is not None:
            self.error = error

    def relabel(self, error: str) -> "ProxyError":
        """Copy of this error under another route label.

        The original instance may be shared by coalesced proxy callers, so it
        is never mutated.
        """
        return type(self)(self.message, status=self.status, endpoint=self.endpoint, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "status": self.status,
        }


class UpstreamThrottled(ProxyError):
    """Upstream answered 429. Handled by the queue worker, never surfaced."""

    default_status = 429


class UpstreamError(ProxyError):
    """Upstream answered with a non-success status or the request failed"""


class UpstreamTimeout(ProxyError):
    """Upstream did not answer within the configured timeout"""


class InternalQueueError(ProxyError):
    """Unexpected failure inside the request queue worker"""

    error = "Internal server error"


class SourceNotFound(ProxyError):
    """No episode source could be resolved for an anime"""

    default_status = 404
    error = "Failed to fetch video"


class ProviderError(ProxyError):
    """The anime provider raised while looking up episodes or streams"""
