import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tourney.database import init_db
from tourney.routes import runtime, tournaments

logger = logging.getLogger(__name__)

app = FastAPI(title="Tourney API")

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tournaments.router, prefix="/api", tags=["tournaments"])
# Runtime (match scoring + bracket advancement)
app.include_router(runtime.router, prefix="/api", tags=["runtime"])


@app.on_event("startup")
def on_startup():
    init_db()  # Imports models and creates tables
    route_count = sum(1 for r in app.routes if getattr(r, "path", None))
    logger.info("Tourney API started: %d routes registered", route_count)


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify the service is up"""
    return {"app_name": "Tourney API", "status": "healthy"}
