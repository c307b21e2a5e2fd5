"""
Episode list and video source routes
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from app.config import get_resolver
from app.models import UPSTREAM_ERROR_RESPONSES, EpisodesResponse, WatchResponse
from app.sources import EpisodeSourceResolver
from app.utils import parse_episode_number, parse_language

router = APIRouter(prefix="/api", responses=UPSTREAM_ERROR_RESPONSES)


@router.get("/episodes/{anime_id}", response_model=EpisodesResponse, tags=["Episodes"])
async def get_episodes(
    anime_id: int = Path(..., ge=1, description="MyAnimeList anime id"),
    language: str = Query("sub", description="Language (sub or dub)"),
    resolver: EpisodeSourceResolver = Depends(get_resolver),
):
    """
    Get the episode list of the provider show matching an anime

    - **anime_id**: MyAnimeList id
    - **language**: Language (sub or dub)
    """
    try:
        lang_enum = parse_language(language)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return await resolver.episodes(anime_id, lang_enum)


@router.get("/watch/{anime_id}/{episode}", response_model=WatchResponse, tags=["Streams"])
async def get_episode_sources(
    anime_id: int = Path(..., ge=1, description="MyAnimeList anime id"),
    episode: str = Path(..., description="Episode number, defaults to 1 if invalid"),
    language: str = Query("sub", description="Language (sub or dub)"),
    resolver: EpisodeSourceResolver = Depends(get_resolver),
):
    """
    Get streaming links for one episode

    - **anime_id**: MyAnimeList id
    - **episode**: Episode number
    - **language**: Language (sub or dub)
    """
    try:
        lang_enum = parse_language(language)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    episode_num = parse_episode_number(episode)
    sources = await resolver.sources(anime_id, episode_num, lang_enum)
    return WatchResponse(
        id=anime_id,
        episode=episode_num,
        language=language.lower(),
        sources=sources,
    )
