"""
Main HTTP server for Taskbell.

Serves the notification relay and the Telegram dispatcher endpoints.
"""

import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskbell import __version__
from taskbell.core.config import get_config
from .dispatch_api import router as dispatch_router
from .relay_api import router as relay_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Taskbell API",
    description="Task and sprint notification relay and Telegram dispatcher",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Include routers
app.include_router(relay_router)
app.include_router(dispatch_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Taskbell API",
        "version": __version__,
        "endpoints": {
            "relay": "/api/send-telegram-notification",
            "dispatch": "/functions/v1/send-telegram-notification",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def main():
    """Main entry point for HTTP server."""
    server = get_config().server

    logger.info("=" * 60)
    logger.info("Taskbell - API Server")
    logger.info("=" * 60)
    logger.info(f"Host: {server.host}")
    logger.info(f"Port: {server.port}")
    logger.info(f"Dispatcher: {get_config().dispatcher.url}")
    logger.info("=" * 60)

    uvicorn.run(
        "taskbell.ui.http_server:app",
        host=server.host,
        port=server.port,
        reload=server.reload,
    )


if __name__ == "__main__":
    main()
