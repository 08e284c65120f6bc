# barbershop/routers/services_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.data import DEFAULT_SERVICES
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import Appointment, Service
from barbershop.schemas import ServiceCreate, ServicePublic, ServiceUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


def seed_services(session: Session) -> int:
    """Fill an empty catalogue with the default services. Returns how many were added."""
    if session.exec(select(Service)).first() is not None:
        return 0
    for item in DEFAULT_SERVICES:
        session.add(Service(**item))
    session.commit()
    return len(DEFAULT_SERVICES)


def _commit_or_conflict(session: Session):
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A service with that name already exists")


@router.get("", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    return session.exec(select(Service).order_by(Service.name)).all()


@router.get("/{service_id}", response_model=ServicePublic)
def get_service(service_id: int, session: Session = Depends(get_session)):
    service = session.get(Service, service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post("", response_model=ServicePublic, status_code=201)
def create_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    service = Service(name=payload.name.strip(), duration=payload.duration, price=payload.price)
    session.add(service)
    _commit_or_conflict(session)
    session.refresh(service)

    logger.info("Service %s created (%s min)", service.name, service.duration)
    return service


@router.patch("/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    service = session.get(Service, service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(service, field, value.strip() if field == "name" else value)

    session.add(service)
    _commit_or_conflict(session)
    session.refresh(service)
    return service


@router.delete("/{service_id}", status_code=204)
def delete_service(
    service_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    service = session.get(Service, service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")

    # appointments keep their service_name snapshot
    for appt in session.exec(select(Appointment).where(Appointment.service_id == service_id)).all():
        appt.service_id = None
        session.add(appt)

    session.delete(service)
    session.commit()
    logger.info("Service %s deleted", service_id)
