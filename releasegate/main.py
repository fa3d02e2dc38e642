"""ReleaseGate FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from releasegate.api.decisions import router as decisions_router
from releasegate.api.health import router as health_router
from releasegate.api.rules import router as rules_router
from releasegate.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ReleaseGate - Milestone Release Decision Engine",
    description="Decides whether escrowed milestone funds are released, held or disputed, with an append-only audit trail",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(rules_router, prefix="/v1", tags=["Rules"])
app.include_router(decisions_router, prefix="/v1", tags=["Decisions"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "ReleaseGate", "version": "0.1.0", "docs": "/docs"}
