"""
Configuration and singleton setup for the Jikan proxy backend
"""

import os
from functools import lru_cache
from threading import Lock

from anipy_api.provider.providers import AllAnimeProvider
from fastapi import Depends, Request

from app.cache import CacheStore
from app.proxy import JikanProxy
from app.ratelimit import RateGovernor
from app.sources import EpisodeSourceResolver
from app.upstream import UpstreamClient


class Config:
    """Application configuration"""

    # API settings
    TITLE = "Jikan Proxy"
    DESCRIPTION = "Cached, rate-limited proxy for the Jikan anime API"
    VERSION = "1.0.0"
    DOCS_URL = "/docs"
    REDOC_URL = "/redoc"

    # CORS settings
    CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")
    ALLOW_ORIGINS = [CLIENT_URL]
    ALLOW_CREDENTIALS = True
    ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    ALLOW_HEADERS = ["Content-Type", "Authorization", "Accept"]

    # Server settings
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "5000"))
    RELOAD = os.getenv("RELOAD", "false").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Upstream settings
    JIKAN_BASE_URL = os.getenv("JIKAN_BASE_URL", "https://api.jikan.moe/v4")
    CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "300"))
    RATE_LIMIT_DELAY_SECONDS = float(os.getenv("RATE_LIMIT_DELAY_SECONDS", "1.0"))
    UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))


def build_proxy() -> JikanProxy:
    """Create the proxy with its cache, rate governor and request queue.

    Called once by ``create_app``; every route shares the resulting instance
    through ``get_proxy`` so there is a single upstream budget per process.
    """
    client = UpstreamClient(Config.JIKAN_BASE_URL, timeout=Config.UPSTREAM_TIMEOUT_SECONDS)
    return JikanProxy(
        client,
        cache=CacheStore(ttl_seconds=Config.CACHE_TTL_SECONDS),
        governor=RateGovernor(min_interval=Config.RATE_LIMIT_DELAY_SECONDS),
    )


def get_proxy(request: Request) -> JikanProxy:
    """Dependency returning the proxy built at application startup"""
    return request.app.state.proxy


_provider_lock = Lock()


def get_provider() -> AllAnimeProvider:
    """Get configured AllAnime provider instance

    Dependencies run in the threadpool, so first calls may race; the lock
    keeps construction to one instance.
    """
    with _provider_lock:
        return _get_cached_provider()


@lru_cache(maxsize=1)
def _get_cached_provider() -> AllAnimeProvider:
    """Create a single provider instance per process.

    This allows connection pooling inside the provider's requests.Session and
    avoids re-initialization cost on every request.
    """
    return AllAnimeProvider()


def get_resolver(proxy: JikanProxy = Depends(get_proxy)) -> EpisodeSourceResolver:
    return EpisodeSourceResolver(proxy, get_provider())
