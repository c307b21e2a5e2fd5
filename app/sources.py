"""
Episode video source lookup

Maps a MyAnimeList id to an AllAnime show: the MAL entry is fetched through
the proxy (so it is cached and rate-limited like every other Jikan call),
its title is cleaned and searched on the provider, and the first match is
used for episode and stream lookups.
"""

import logging
from typing import Any, Callable, Dict, List, Union

from starlette.concurrency import run_in_threadpool

from anipy_api.provider import LanguageTypeEnum
from anipy_api.provider.providers import AllAnimeProvider

from app import endpoints
from app.errors import ProviderError, ProxyError, SourceNotFound, UpstreamError
from app.models import EpisodeStreamModel
from app.proxy import JikanProxy
from app.utils import clean_search_title

logger = logging.getLogger(__name__)

EPISODES_ERROR = "Failed to fetch episodes"
VIDEO_ERROR = "Failed to fetch video"


class EpisodeSourceResolver:
    def __init__(self, proxy: JikanProxy, provider: AllAnimeProvider):
        self.proxy = proxy
        self.provider = provider

    async def mal_title(self, anime_id: int) -> str:
        payload = await self.proxy.fetch(endpoints.info(anime_id))
        data = payload.get("data") if isinstance(payload, dict) else None
        title = data.get("title") if isinstance(data, dict) else None
        if not title:
            raise UpstreamError(f"No title in MAL entry {anime_id}", status=502)
        return title

    async def resolve(self, anime_id: int):
        """First provider search result for the MAL entry's title"""
        title = await self.mal_title(anime_id)
        search_title = clean_search_title(title)
        logger.info(f"Searching provider for {anime_id}: {search_title!r}")

        results = await self._provider_call(self.provider.get_search, search_title)
        if not results:
            raise SourceNotFound(f"Anime not found on provider: {search_title}")
        return results[0]

    async def episodes(self, anime_id: int, language: LanguageTypeEnum = LanguageTypeEnum.SUB) -> Dict[str, Any]:
        try:
            match = await self.resolve(anime_id)
            episodes = await self._provider_call(self.provider.get_episodes, match.identifier, language)
        except ProxyError as e:
            raise e.relabel(EPISODES_ERROR) from e

        return {
            "id": match.identifier,
            "title": match.name,
            "languages": [str(lang) for lang in match.languages],
            "totalEpisodes": len(episodes),
            "episodes": [_episode_number(ep) for ep in episodes],
        }

    async def sources(
        self,
        anime_id: int,
        episode: Union[int, float],
        language: LanguageTypeEnum = LanguageTypeEnum.SUB,
    ) -> List[EpisodeStreamModel]:
        try:
            match = await self.resolve(anime_id)
            streams = await self._provider_call(self.provider.get_video, match.identifier, episode, language)
            if not streams:
                raise SourceNotFound(f"No video sources found for episode {episode}")
        except ProxyError as e:
            raise e.relabel(VIDEO_ERROR) from e

        return [
            EpisodeStreamModel(
                url=stream.url,
                resolution=stream.resolution,
                language=str(stream.language),
                subtitle=getattr(stream, "subtitle", None),
                referer=getattr(stream, "referrer", None),
            )
            for stream in streams
        ]

    async def _provider_call(self, func: Callable, *args):
        # Provider calls are blocking; errors leave here as ProxyError
        try:
            return await run_in_threadpool(func, *args)
        except Exception as e:
            logger.error(f"Provider call {getattr(func, '__name__', func)} failed: {e}")
            raise ProviderError(str(e) or type(e).__name__) from e


def _episode_number(episode: Union[int, float]) -> Union[int, float]:
    return int(episode) if float(episode).is_integer() else episode
