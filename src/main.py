"""Main entry point for the summarization gateway."""

import uvicorn

from config.settings import get_settings


def main() -> None:
    """Run the API server."""
    settings = get_settings()

    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
