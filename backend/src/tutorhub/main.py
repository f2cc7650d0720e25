from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from tutorhub.api.routers.availability import router as availability_router
from tutorhub.api.routers.bookings import router as bookings_router
from tutorhub.api.routers.health import router as health_router
from tutorhub.api.routers.sessions import router as sessions_router
from tutorhub.api.routers.users import router as users_router
from tutorhub.domain.scheduling.errors import OverlappingHoliday, SchedulingError
from tutorhub.logging import configure_logging
from tutorhub.services.errors import (
    AvailabilityNotSet,
    DuplicateSessionForDate,
    HolidayConflict,
    InvalidSlot,
    NotAuthorized,
    NotFoundError,
    ServiceError,
    SessionHasBookings,
    SlotAlreadyBooked,
)
from tutorhub.settings import Settings, load_settings

_SERVICE_STATUS: tuple[tuple[type[ServiceError], int], ...] = (
    (NotFoundError, 404),
    (NotAuthorized, 403),
    (InvalidSlot, 422),
    (HolidayConflict, 409),
    (SlotAlreadyBooked, 409),
    (DuplicateSessionForDate, 409),
    (SessionHasBookings, 409),
    (AvailabilityNotSet, 400),
)


def _error(status_code: int, kind: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"kind": kind, "detail": detail})


def create_app(settings: Settings | None = None) -> FastAPI:
    active_settings = settings or load_settings()
    configure_logging(debug=active_settings.debug)

    if active_settings.db_backend == "postgres":
        from tutorhub.infra.db.session import create_tables

        create_tables()

    app = FastAPI(title=active_settings.app_name, version=active_settings.app_version)

    @app.exception_handler(ServiceError)
    async def handle_service_error(_: Request, exc: ServiceError) -> JSONResponse:
        status_code = next((code for cls, code in _SERVICE_STATUS if isinstance(exc, cls)), 400)
        return _error(status_code, exc.kind, str(exc))

    @app.exception_handler(SchedulingError)
    async def handle_scheduling_error(_: Request, exc: SchedulingError) -> JSONResponse:
        status_code = 409 if isinstance(exc, OverlappingHoliday) else 422
        return _error(status_code, exc.kind, str(exc))

    @app.exception_handler(HTTPException)
    async def passthrough_http(_: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(availability_router)
    app.include_router(sessions_router)
    app.include_router(bookings_router)

    return app


app = create_app()
