from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.sampler import build_default_sampler


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    sampler = build_default_sampler()
    sampler.start()
    try:
        yield
    finally:
        sampler.shutdown()
        build_default_sampler.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="SensorThings Sampler",
        description="Publishes simulated light-level Observations to a SensorThings Datastream.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
