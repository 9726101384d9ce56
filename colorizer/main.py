from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from colorizer.handlers import session_handler
from colorizer.services.sessions import session_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Release every preview still held by an open session.
    session_store.close_all()
    from colorizer.services.providers.registry import get_provider

    if get_provider.cache_info().currsize:
        await get_provider().close()


app = FastAPI(title="AI Image Colorizer", lifespan=lifespan)

app.include_router(session_handler.router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
