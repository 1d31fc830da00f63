# fantasy_sdk/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fantasy_sdk import __version__
from fantasy_sdk.api import routes_auth, routes_league, routes_trade
from fantasy_sdk.core.config import settings
from fantasy_sdk.core.logging import configure_logging
from fantasy_sdk.db.session import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    settings.validate_at_startup()
    init_db()
    logger.info("%s %s started (env=%s)", settings.APP_NAME, __version__, settings.APP_ENV)
    yield


app = FastAPI(title=settings.APP_NAME, version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)

# Routers
app.include_router(routes_auth.router)
app.include_router(routes_league.router)
app.include_router(routes_trade.router)


@app.get("/health")
def health():
    return {"ok": True, "env": settings.APP_ENV}
