#!/usr/bin/env python3
"""
Main entry point for the Jikan proxy FastAPI application
"""

import logging

import uvicorn
from app import create_app
from app.config import Config

logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

# Create FastAPI application instance
app = create_app()

if __name__ == "__main__":
    logging.getLogger(__name__).info(
        f"Backend server running on http://{Config.HOST}:{Config.PORT}, "
        f"accepting requests from: {Config.CLIENT_URL}"
    )
    uvicorn.run(
        "main:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=Config.RELOAD
    )
