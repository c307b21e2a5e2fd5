"""Endpoint keys for the Jikan v4 API, relative to ``Config.JIKAN_BASE_URL``."""

from urllib.parse import quote

PAGE_LIMIT = 24


def trending() -> str:
    return f"/top/anime?filter=airing&limit={PAGE_LIMIT}"


def recent() -> str:
    return f"/seasons/now?limit={PAGE_LIMIT}"


def search(query: str) -> str:
    return f"/anime?q={quote(query, safe='')}&limit={PAGE_LIMIT}"


def info(anime_id: int) -> str:
    return f"/anime/{anime_id}/full"
