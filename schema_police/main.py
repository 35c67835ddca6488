"""
FastAPI application entry point.
"""

from fastapi import FastAPI

from schema_police import __version__
from schema_police.api import webhooks
from schema_police.config import settings
from schema_police.middleware.logging import RequestLoggingMiddleware
from schema_police.utils.logging import get_logger, setup_logging

# Configure structured logging
setup_logging(settings.log_level)

logger = get_logger(__name__)

app = FastAPI(
    title="GraphQL Schema Police",
    description="Reports breaking GraphQL schema changes on GitHub pull requests",
    version=__version__
)

app.add_middleware(RequestLoggingMiddleware)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "GraphQL Schema Police",
        "version": __version__,
        "docs": "/docs"
    }


app.include_router(webhooks.router)


def run() -> None:
    import uvicorn

    logger.info(f"GraphQLPolice started on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
