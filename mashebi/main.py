"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from datetime import UTC, datetime
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mashebi.api import health
from mashebi.api import router as api_router
from mashebi.core.config import settings

app = FastAPI(
    title="Mashebi API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, Any]:
    """Root route; minimal payload for discovery."""
    return {"ok": True, "db": "postgresql", "ts": datetime.now(UTC).isoformat()}
