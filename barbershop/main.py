# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from barbershop.config import get_settings
from barbershop.core import ParseError
from barbershop.db import create_db_and_tables, engine
from barbershop.routers import (
    appointments_routes,
    auth_routes,
    availability_routes,
    barbers_routes,
    schedules_routes,
    services_routes,
    users_routes,
)

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    with Session(engine) as session:
        added = services_routes.seed_services(session)
    if added:
        logger.info("Seeded %d default services", added)
    logger.info("Barbershop API started")
    yield


app = FastAPI(title="Barbershop Booking API", lifespan=lifespan)


@app.exception_handler(ParseError)
async def parse_error_handler(request: Request, exc: ParseError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(services_routes.router)
app.include_router(schedules_routes.router)
app.include_router(barbers_routes.router)
app.include_router(availability_routes.router)
app.include_router(appointments_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
