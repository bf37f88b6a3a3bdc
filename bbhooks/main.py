"""
FastAPI application entry point.
"""

from fastapi import FastAPI

from bbhooks import __version__
from bbhooks.api import webhooks
from bbhooks.config import settings
from bbhooks.utils.logging import get_logger, setup_logging

# Configure structured logging
setup_logging(settings.log_level)

logger = get_logger(__name__)

app = FastAPI(
    title="Bitbucket Server Hook Processor",
    description="Translates Bitbucket Server push hooks into branch and pull request head updates",
    version=__version__
)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Bitbucket Server Hook Processor API",
        "version": __version__,
        "docs": "/docs"
    }


app.include_router(webhooks.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
