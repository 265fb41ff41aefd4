"""Run the API with uvicorn: python -m redis_web_manager"""

import uvicorn

from redis_web_manager.core.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "redis_web_manager.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.PORT,
        reload=settings.app.ENVIRONMENT == "development",
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
