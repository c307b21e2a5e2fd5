"""
Jikan proxy backend application package
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.config import Config, build_proxy
from app.errors import ProxyError
from app.models import ErrorResponse
from app.proxy import JikanProxy
from app.routes.root import router as root_router
from app.routes.anime import router as anime_router
from app.routes.stream import router as stream_router

logger = logging.getLogger(__name__)


def create_app(proxy: Optional[JikanProxy] = None) -> FastAPI:
    """Create and configure FastAPI application"""

    # Initialize FastAPI app
    app = FastAPI(
        title=Config.TITLE,
        description=Config.DESCRIPTION,
        version=Config.VERSION,
        docs_url=Config.DOCS_URL,
        redoc_url=Config.REDOC_URL
    )

    # One proxy per application: shared cache, rate governor and queue
    app.state.proxy = proxy if proxy is not None else build_proxy()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.ALLOW_ORIGINS,
        allow_credentials=Config.ALLOW_CREDENTIALS,
        allow_methods=Config.ALLOW_METHODS,
        allow_headers=Config.ALLOW_HEADERS,
    )

    # Include routers
    app.include_router(root_router)
    app.include_router(anime_router)
    app.include_router(stream_router)

    # Exception handlers
    @app.exception_handler(ProxyError)
    async def proxy_exception_handler(request: Request, exc: ProxyError):
        """Upstream and queue failures, with the upstream status when known"""
        return JSONResponse(status_code=exc.status, content=exc.to_dict())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Custom HTTP exception handler"""
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(
                status_code=404,
                content={"success": False, "message": "Route not found"}
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                detail=str(exc.detail),
                error_type="HTTPException"
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": str(exc) or "Something went wrong!"}
        )

    return app
