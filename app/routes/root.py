"""
Root and health routes for the Jikan proxy backend
"""

from fastapi import APIRouter, Depends

from app.config import Config, get_proxy
from app.models import HealthResponse
from app.proxy import JikanProxy

router = APIRouter()


@router.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to the Jikan proxy",
        "upstream": Config.JIKAN_BASE_URL,
        "version": Config.VERSION,
        "docs": Config.DOCS_URL,
        "endpoints": {
            "trending": "/api/trending",
            "recent": "/api/recent",
            "search": "/api/search/{query}",
            "info": "/api/info/{anime_id}",
            "episodes": "/api/episodes/{anime_id}",
            "watch": "/api/watch/{anime_id}/{episode}"
        }
    }


@router.get("/api/test", tags=["Root"])
async def backend_test():
    """Liveness probe used by the front-end"""
    return {"message": "Backend is working!"}


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(proxy: JikanProxy = Depends(get_proxy)):
    """Health check endpoint with proxy queue and cache statistics"""
    return HealthResponse(
        status="healthy",
        upstream=Config.JIKAN_BASE_URL,
        proxy=proxy.stats(),
    )
