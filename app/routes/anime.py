"""
Anime metadata routes, forwarded to Jikan through the proxy
"""

from fastapi import APIRouter, Depends, Path

from app import endpoints
from app.config import get_proxy
from app.models import UPSTREAM_ERROR_RESPONSES
from app.proxy import JikanProxy

router = APIRouter(prefix="/api", responses=UPSTREAM_ERROR_RESPONSES)


@router.get("/trending", tags=["Discovery"])
async def get_trending(proxy: JikanProxy = Depends(get_proxy)):
    """Top currently airing anime"""
    return await proxy.fetch(endpoints.trending())


@router.get("/recent", tags=["Discovery"])
async def get_recent(proxy: JikanProxy = Depends(get_proxy)):
    """Anime airing this season"""
    return await proxy.fetch(endpoints.recent())


@router.get("/search/{query}", tags=["Search"])
async def search_anime(
    query: str = Path(..., min_length=1, description="Anime name to search for"),
    proxy: JikanProxy = Depends(get_proxy),
):
    """
    Search anime by name

    - **query**: The anime name or query to search for
    """
    return await proxy.fetch(endpoints.search(query))


@router.get("/info/{anime_id}", tags=["Anime Info"])
async def get_anime_info(
    anime_id: int = Path(..., ge=1, description="MyAnimeList anime id"),
    proxy: JikanProxy = Depends(get_proxy),
):
    """
    Full MyAnimeList entry for an anime

    - **anime_id**: MyAnimeList id
    """
    return await proxy.fetch(endpoints.info(anime_id))
