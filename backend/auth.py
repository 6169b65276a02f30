import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from starlette import status

from database import get_db
from models.sesiones import Sesion
from models.users import User
from schemas.auth import Credenciales, Mensaje, SesionActual, Token
from utils.auth_utils import (
    create_access_token,
    get_current_user,
    get_user_identifier,
    hash_password,
    verify_password,
)
from utils.formatting import now_local

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("auth")

db_dependency = Annotated[Session, Depends(get_db)]
user_dependency = Annotated[dict, Depends(get_current_user)]


@router.post("/signup", response_model=Mensaje, status_code=status.HTTP_201_CREATED)
def sign_up(credenciales: Credenciales, db: db_dependency):
    email = credenciales.email.strip().lower()
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El usuario ya está registrado.")

    new_user = User(email=email, hashed_password=hash_password(credenciales.password))
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"User {new_user.id} registered")
    return Mensaje(mensaje="Registro OK.")


@router.post("/login", response_model=Token)
def sign_in(credenciales: Credenciales, db: db_dependency):
    email = credenciales.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not user.is_active or not verify_password(credenciales.password, user.hashed_password):
        logger.warning(f"Failed sign-in for {email}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Credenciales de acceso no válidas.")

    token, session_id, expires_at = create_access_token(user)
    db.add(Sesion(id=session_id, user_id=user.id, expires_at=expires_at))
    db.commit()

    logger.info(f"User {user.id} signed in (session {session_id})")
    return Token(access_token=token, token_type="bearer", expires_at=expires_at)


@router.post("/logout", response_model=Mensaje)
def sign_out(user: user_dependency, db: db_dependency):
    sesion = db.query(Sesion).filter(Sesion.id == user["jti"]).first()
    sesion.revoked_at = now_local()
    db.commit()

    logger.info(f"User {get_user_identifier(user)} signed out (session {sesion.id})")
    return Mensaje(mensaje="Sesión cerrada.")


@router.get("/session", response_model=SesionActual)
def get_session(user: user_dependency):
    return SesionActual(
        user_id=get_user_identifier(user),
        email=user["email"],
        expires_at=user["exp"],
    )
