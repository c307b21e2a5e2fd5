"""
Pydantic models for the Jikan proxy backend
"""

from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Union


class EpisodeStreamModel(BaseModel):
    """Model for episode stream"""
    url: str
    resolution: int
    language: str
    subtitle: Optional[Dict[str, Any]] = None
    referer: Optional[str] = None


class WatchResponse(BaseModel):
    """Model for an episode's video sources"""
    id: int
    episode: int
    language: str
    sources: List[EpisodeStreamModel]


class EpisodesResponse(BaseModel):
    """Model for a provider episode list"""
    id: str
    title: str
    languages: List[str]
    totalEpisodes: int
    episodes: List[Union[int, float]]


class ErrorResponse(BaseModel):
    """Model for error responses"""
    detail: str
    error_type: str


class ProxyErrorResponse(BaseModel):
    """Model for upstream failures surfaced by the proxy"""
    error: str
    message: str
    status: int


class HealthResponse(BaseModel):
    """Model for health check"""
    status: str
    upstream: str
    proxy: Dict[str, Any]


# OpenAPI documentation of ProxyError bodies shared by the proxied routes
UPSTREAM_ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    404: {"model": ProxyErrorResponse, "description": "Not found upstream"},
    500: {"model": ProxyErrorResponse, "description": "Upstream or provider failure"},
}
