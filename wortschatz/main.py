"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wortschatz.config import settings
from wortschatz.database import init_db
from wortschatz.errors import WortschatzError
from wortschatz.logging_config import setup_logging
from wortschatz.routes import alternatives_router, entries_router

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Starting Wortschatz...")

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db()
    logger.info("Database initialized")

    if not settings.oracle_configured:
        logger.warning("OPENAI_API_KEY not set, review/completion/alternatives are disabled")

    yield

    logger.info("Shutting down Wortschatz...")


app = FastAPI(
    title="Wortschatz",
    description="Personal German vocabulary manager with AI review and completion",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(WortschatzError)
async def wortschatz_error_handler(request: Request, exc: WortschatzError) -> JSONResponse:
    """Map application errors to JSON responses with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app.include_router(entries_router)
app.include_router(alternatives_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "0.1.0",
    }


def run() -> None:
    """Run the API server (for use with `wortschatz-api` command)."""
    import uvicorn

    uvicorn.run(
        "wortschatz.main:app",
        host="0.0.0.0",  # noqa: S104  # nosec B104 - Development server
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    run()
