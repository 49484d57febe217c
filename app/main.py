# app/main.py
from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging
import logging.config
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.appconfig import settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

from app.database.connection import Database
from app.jobs.appointment_jobs import run_no_show_sweeper

# Import routers
from app.users.auth_routers import router as auth_router
from app.users.user_routes import router as user_router
from app.system_services.appointment_routes import router as appointment_router
from app.system_services.availability_routes import router as availability_router
from app.system_services.concern_routes import router as concern_router
from app.system_services.referral_routes import router as referral_router
from app.system_services.record_routes import router as record_router
from app.system_services.pharmacy_routes import router as pharmacy_router
from app.system_services.notification_routes import router as notification_router
from app.system_services.admin_routes import router as admin_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    database: Database = app.state.database

    # Startup
    print("\n===============================================================================")
    print(f" 🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f" ✅ Database: {'SQLite' if database.url.startswith('sqlite') else 'PostgreSQL'}")
    print(f" ✅ Default time per patient: {settings.DEFAULT_TIME_PER_PATIENT} min")
    if app.state.sweeper_enabled:
        print(f" ✅ No-show sweep: daily at {settings.NO_SHOW_SWEEP_HOUR:02d}:{settings.NO_SHOW_SWEEP_MINUTE:02d}")
    print("===============================================================================\n")

    if settings.DB_CREATE_TABLES:
        await database.create_all()

    sweeper: Optional[asyncio.Task] = None
    if app.state.sweeper_enabled:
        sweeper = asyncio.create_task(
            run_no_show_sweeper(database, settings.NO_SHOW_SWEEP_HOUR, settings.NO_SHOW_SWEEP_MINUTE)
        )

    yield

    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    await database.dispose()
    print("👋 Shutting down")


# ============================================================
# ✅ ERROR ENVELOPE
# ============================================================
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    message = error.get("msg", "Invalid request")
    if error.get("type") == "value_error":
        return message.removeprefix("Value error, ")
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    return f"{'.'.join(location)}: {message}" if location else message


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = first_validation_message(exc)
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"success": False, "message": message})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})


# ============================================================
# ✅ APP FACTORY
# ============================================================
def create_app(database: Optional[Database] = None, enable_sweeper: Optional[bool] = None) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Appointments, availability, concerns, referrals, records and pharmacy for campus health",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.database = database or Database(
        settings.DATABASE_URL, echo=settings.DB_ECHO, pool_size=settings.DB_POOL_SIZE
    )
    app.state.sweeper_enabled = settings.NO_SHOW_SWEEP_ENABLED if enable_sweeper is None else enable_sweeper

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include routers
    app.include_router(auth_router, tags=["Authentication"])
    app.include_router(user_router)
    app.include_router(appointment_router)
    app.include_router(availability_router)
    app.include_router(concern_router)
    app.include_router(referral_router)
    app.include_router(record_router)
    app.include_router(pharmacy_router)
    app.include_router(notification_router)
    app.include_router(admin_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
