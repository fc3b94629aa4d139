# src/app/main.py
from __future__ import annotations
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.app.config import settings
from src.app.routers.custom_recipes import router as custom_recipes_router
from src.app.routers.favorites import router as favorites_router
from src.app.routers.recipes import router as recipes_router
from src.app.services.session import RecipeBoxSession

# stdout logging for dev and containers
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)


def create_app(session: Optional[RecipeBoxSession] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        current = session or RecipeBoxSession.from_settings(settings)
        app.state.session = current
        await current.open()
        try:
            yield
        finally:
            await current.close()

    app = FastAPI(title="Pepe Nero Recipe Box API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(recipes_router)
    app.include_router(favorites_router)
    app.include_router(custom_recipes_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
