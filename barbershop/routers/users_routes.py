# barbershop/routers/users_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.config import get_settings
from barbershop.db import get_session
from barbershop.models import User
from barbershop.schemas import UserCreate, UserPublic
from barbershop.auth import get_current_user, hash_password

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    email = user.email.strip().lower()

    # 1) Email must be free
    existing = session.exec(
        select(User).where(User.email == email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 2) The configured owner account is the only way to get an admin
    role = user.role.value
    admin_email = get_settings().bootstrap_admin_email
    if admin_email and email == admin_email.strip().lower():
        role = "admin"

    db_user = User(
        name=user.name.strip(),
        email=email,
        password_hash=hash_password(user.password),
        role=role,
    )
    session.add(db_user)
    session.commit()
    session.refresh(db_user)

    logger.info("Registered %s as %s", db_user.email, db_user.role)
    return {
        "id": db_user.id,
        "name": db_user.name,
        "email": db_user.email,
        "role": db_user.role,
    }
