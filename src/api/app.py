"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from src.core.logging import get_logger, setup_logging
from src.summarization.manager import SummarizationManager

logger = get_logger(__name__)

VERSION = "0.1.0"


def create_app(manager: SummarizationManager | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        manager: Pre-built gateway (built from settings at startup if omitted)
    """
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.summarization_manager = manager or SummarizationManager(settings)
        summarizer = app.state.summarization_manager
        logger.info(
            "Summarization gateway ready (provider=%s, model=%s)",
            summarizer.provider.value,
            summarizer.model,
        )

        yield

        await summarizer.shutdown()
        logger.info("Summarization gateway shut down")

    app = FastAPI(
        title="Feed Summarizer",
        description="Multi-provider article summarization gateway",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import summaries

    app.include_router(summaries.router, prefix="/api", tags=["summaries"])

    @app.get("/health")
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "version": VERSION,
        }

    return app
