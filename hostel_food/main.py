"""FastAPI entrypoint for the hostel food ordering service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hostel_food.api.v1.api import api_router
from hostel_food.core.config import settings
from hostel_food.db.base import Base
from hostel_food.db.seed import ensure_seed_data
from hostel_food.db.session import SessionLocal, engine
from hostel_food.services.account_service import ensure_default_admin
from hostel_food.services.rate_limit import build_rate_limiter

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[HTTP] Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.on_event("startup")
def startup() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    Base.metadata.create_all(bind=engine)
    app.state.rate_limiter = build_rate_limiter(settings)
    with SessionLocal() as session:
        try:
            ensure_seed_data(session)
            admin_present = ensure_default_admin(session)
            logger.info("[BOOTSTRAP] default admin present: %s", "yes" if admin_present else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Seed/bootstrap failed; continuing startup.")


@app.get("/")
def root() -> dict[str, str]:
    return {"status": "ok", "service": settings.app_name}
