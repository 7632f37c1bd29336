from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from duomatch.api.routes.chat import router as chat_router
from duomatch.api.routes.diamonds import router as diamonds_router
from duomatch.api.routes.feed import router as feed_router
from duomatch.api.routes.health import router as health_router
from duomatch.api.routes.internal_diamonds import router as internal_diamonds_router
from duomatch.api.routes.reports import router as reports_router
from duomatch.api.routes.swipes import router as swipes_router
from duomatch.chat.realtime import RedisRealtimeChannel
from duomatch.core.config import get_settings
from duomatch.core.logging import configure_logging
from duomatch.db.session import dispose_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.realtime_channel = RedisRealtimeChannel.from_url(get_settings().redis_url)
    try:
        yield
    finally:
        await app.state.realtime_channel.aclose()
        await dispose_engine()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)

    app = FastAPI(
        title="DuoMatch API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.include_router(health_router)
    app.include_router(feed_router)
    app.include_router(swipes_router)
    app.include_router(diamonds_router)
    app.include_router(chat_router)
    app.include_router(reports_router)
    app.include_router(internal_diamonds_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "duomatch.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
