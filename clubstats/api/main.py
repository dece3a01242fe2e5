"""FastAPI application: club batting/pitching tables with league-relative stats."""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clubstats.api.routes import router
from clubstats.analysis.loader import get_loader

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Club Stats API",
    description="Batting and pitching tables with wOBA, OPS+, wRC+, FIP, ERA+ and WAR",
    version="1.0.0",
)

_origins = ["http://localhost:3000", "http://localhost:3001"]
if os.environ.get("FRONTEND_URL"):
    _origins.append(os.environ["FRONTEND_URL"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.on_event("startup")
def startup():
    settings = get_loader().settings
    logger.info(f"Serving club {settings.CLUB_ID} from {settings.BASE_URL}")


@app.get("/health")
def health():
    return {"status": "ok"}
