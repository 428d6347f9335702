import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from core import bootstrap, errors
from core.config import Settings
from core.cors import AllowAllCORSMiddleware
from core.db import Database
from users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    # Schema must be ready before the first request; failures abort startup.
    await bootstrap.run(settings)
    app.state.database = await Database.connect(settings)
    logger.info("database_pool_opened dsn=%s", settings.redacted_dsn(settings.db_name))
    try:
        yield
    finally:
        await app.state.database.close()
        app.state.database = None
        logger.info("database_pool_closed")


def create_app() -> FastAPI:
    app = FastAPI(title="users-api", lifespan=lifespan)

    # Any browser origin may call this API.
    app.add_middleware(AllowAllCORSMiddleware)
    errors.register(app)

    app.include_router(users_router.router, tags=["users"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
