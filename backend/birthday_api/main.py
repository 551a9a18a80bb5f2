import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError
from birthday_api.config import settings
from birthday_api.core.errors import register_exception_handlers
from birthday_api.core.logging import configure_logging
from birthday_api.core.middleware import install_middleware
from birthday_api.database import engine, ping_database
from birthday_api.routers import payments

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    try:
        await ping_database()
    except (SQLAlchemyError, OSError) as e:
        # Nothing works without the store, stop the process
        logger.critical("Database connection error: %s", e)
        raise SystemExit(1) from e
    logger.info("Connected to database")
    logger.info("Birthday App Backend running on port %s (%s)", settings.PORT, settings.ENVIRONMENT)
    yield
    await engine.dispose()

app = FastAPI(title="Birthday Payments API", lifespan=lifespan)

install_middleware(app)
register_exception_handlers(app)

app.include_router(payments.router)

@app.get("/api/health")
async def health():
    return {"status": "OK", "message": "Birthday App Backend is running"}


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
