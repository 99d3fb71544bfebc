import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from hotel_events.core.config import settings
from hotel_events.core.exceptions import ReservationError
from hotel_events.db.init_db import create_database, seed_roles
from hotel_events.db.base import Base
from hotel_events.db.session import engine, SessionLocal
from hotel_events.api.v1.router import api_router
from hotel_events.api.v1.public.verify import router as verify_router
from hotel_events.services.notifications import cleanup_old_notifications

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def _notification_cleanup_loop() -> None:
    """Background task: purge notifications past the retention window."""
    while True:
        try:
            db = SessionLocal()
            try:
                count = cleanup_old_notifications(db)
                if count:
                    logger.info("Removed %d expired notification(s).", count)
            finally:
                db.close()
        except Exception:
            logger.exception("Error during notification cleanup.")
        await asyncio.sleep(settings.NOTIFICATION_CLEANUP_INTERVAL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists, create tables and seed roles
    if settings.CREATE_DATABASE_ON_STARTUP:
        create_database()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_roles(db)
    finally:
        db.close()

    cleanup_task = None
    if settings.NOTIFICATION_CLEANUP_ENABLED:
        cleanup_task = asyncio.create_task(_notification_cleanup_loop())
    yield

    # Shutdown: cancel background task
    if cleanup_task is not None:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message},
    )


app.include_router(api_router, prefix=settings.API_V1_STR)
# QR codes link to /verify-booking on the public host
app.include_router(verify_router)


@app.get("/")
def read_root():
    return {"Hello": settings.PROJECT_NAME}
