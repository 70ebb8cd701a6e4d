import uvicorn

from coursequiz.core.config import settings


def run() -> None:
    """Serve the API with uvicorn on ``HOST``/``PORT`` from settings."""
    uvicorn.run(
        "coursequiz.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
