"""Utility functions for the Jikan proxy backend."""

from __future__ import annotations

import re

import requests
from requests.adapters import HTTPAdapter

from anipy_api.provider import LanguageTypeEnum


_HTTP_SESSION: requests.Session | None = None


def get_http_session() -> requests.Session:
    """Shared requests session with connection pooling.

    Transport retries stay off: the proxy queue decides what is retried.
    """
    global _HTTP_SESSION
    if _HTTP_SESSION is not None:
        return _HTTP_SESSION

    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=10, pool_maxsize=10, max_retries=0)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    _HTTP_SESSION = session
    return session


def parse_language(language: str) -> LanguageTypeEnum:
    """Parse language string to LanguageTypeEnum"""
    if language.lower() == "sub":
        return LanguageTypeEnum.SUB
    elif language.lower() == "dub":
        return LanguageTypeEnum.DUB
    else:
        raise ValueError(f"Invalid language '{language}', must be 'sub' or 'dub'")


def parse_episode_number(episode: str) -> int:
    """Episode path segment to a positive int, falling back to 1"""
    try:
        value = int(episode)
    except (TypeError, ValueError):
        return 1
    return value if value > 0 else 1


def clean_search_title(title: str) -> str:
    """Normalize a MyAnimeList title for a provider search.

    Drops parenthesised fragments and "season N" / "part N" suffixes.
    """
    cleaned = title.lower()
    cleaned = re.sub(r"\([^)]*\)", "", cleaned)
    cleaned = re.sub(r"season \d+", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"part \d+", "", cleaned, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", cleaned.strip())
