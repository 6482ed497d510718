from __future__ import annotations

import os
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent

# Load .env only if exists (development fallback)
env_path = ROOT_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)

import uvicorn  # noqa: E402
from fastapi import Depends, FastAPI  # noqa: E402
from starlette.middleware.cors import CORSMiddleware  # noqa: E402

from booking_api import config  # noqa: E402
from booking_api.db import close_mongo, connect_mongo, get_db  # noqa: E402
from booking_api.exception_handlers import register_exception_handlers  # noqa: E402
from booking_api.indexes.booking_indexes import ensure_booking_indexes  # noqa: E402
from booking_api.middleware.access_log_middleware import AccessLogMiddleware  # noqa: E402
from booking_api.middleware.correlation_id import CorrelationIdMiddleware  # noqa: E402
from booking_api.routers.bookings import router as bookings_router  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(config.SERVICE_NAME)

app = FastAPI(title=config.APP_NAME, version=config.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=config.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AccessLogMiddleware)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

# Routers (/api prefix is on each router)
app.include_router(bookings_router)


@app.get("/api/health")
async def health(db=Depends(get_db)) -> dict[str, Any]:
    """Main health check with database ping"""
    ok = False
    try:
        await db.command("ping")
        ok = True
    except Exception:
        logger.warning("Health check ping failed", exc_info=True)
        ok = False
    return {"ok": ok, "service": config.SERVICE_NAME}


@app.get("/health")
@app.get("/health/")
async def deployment_health() -> dict[str, Any]:
    """Simple health check for deployment platforms"""
    return {"ok": True, "service": config.SERVICE_NAME, "status": "healthy"}


@app.on_event("startup")
async def _startup() -> None:
    await connect_mongo()
    await ensure_booking_indexes(await get_db())
    logger.info("Connected to MongoDB; startup complete")


@app.on_event("shutdown")
async def _shutdown() -> None:
    await close_mongo()
    logger.info("Shutdown complete")


def main() -> None:
    port = config.listen_port()
    logger.info("Server running on port %s", port)
    uvicorn.run(app, host=os.environ.get("HOST", "0.0.0.0"), port=port)


if __name__ == "__main__":
    main()
