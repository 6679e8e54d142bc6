"""FastAPI app: lifespan, CORS, router registration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from .api.tracker import router as tracker_router
from .api.settings import router as settings_router
from .api.predictions import router as predictions_router
from .api.trends import router as trends_router
from .core.database import get_database
from .core.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


# Used by: FastAPI lifespan: open the database on startup, close on shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    db = get_database()
    await db.connect(settings.DATABASE_URL)

    yield

    await db.disconnect()


app = FastAPI(
    title="Napwise API",
    version="1.0.0",
    description="Napwise - sleep and nursing log with nap prediction",
    lifespan=lifespan
)

cors_origins = settings.CORS_ORIGINS.copy()
if settings.CORS_EXTRA_ORIGINS:
    cors_origins.extend([o.strip() for o in settings.CORS_EXTRA_ORIGINS.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tracker_router)
app.include_router(settings_router)
app.include_router(predictions_router)
app.include_router(trends_router)


@app.get("/health", tags=["monitoring"])
async def health():
    return {"status": "ok", "database": get_database().is_connected}
