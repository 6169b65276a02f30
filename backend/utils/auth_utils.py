import logging
import os
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Tuple

import pytz
from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from database import get_db
from models.sesiones import Sesion
from models.users import User

load_dotenv()

logger = logging.getLogger(__name__)

# === Token configuration ===
# Override SECRET_KEY in every real deployment.
SECRET_KEY = os.getenv("SECRET_KEY", "reenvasado-dev-secret-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return bcrypt_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt_context.verify(password, hashed_password)


def create_access_token(user: User) -> Tuple[str, str, datetime]:
    """
    Issue a signed token for ``user``.

    Returns the token, its session id (the ``jti`` claim, also the primary
    key of the ``sesiones`` row) and its expiry.
    """
    session_id = str(uuid.uuid4())
    expires_at = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "jti": session_id,
        "exp": expires_at,
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM), session_id, expires_at


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    FastAPI dependency that requires an active session.

    The token is expected in the ``Authorization: Bearer <token>`` header.
    Besides the signature and expiry, the session it names must exist and
    not have been closed with /auth/logout.

    Usage:
        @router.get("/secure-data")
        def secure_endpoint(user: dict = Depends(get_current_user)):
            ...
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise _unauthorized("Sesión no iniciada.")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Cabecera de autorización no válida.")

    try:
        payload = jwt.decode(parts[1], SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("La sesión ha caducado.")
    except JWTError as e:
        raise _unauthorized(f"Token no válido: {e}")

    session_id = payload.get("jti")
    if not session_id or not payload.get("sub"):
        raise _unauthorized("Token no válido: faltan datos de sesión.")

    sesion = db.query(Sesion).filter(Sesion.id == session_id).first()
    if sesion is None or sesion.revoked_at is not None:
        raise _unauthorized("La sesión ya no está activa.")
    if not sesion.user or not sesion.user.is_active:
        raise _unauthorized("Usuario desactivado.")

    return payload


def get_user_identifier(user: Dict[str, Any]) -> int:
    """The identity attribute that scopes every event read and write: the user id."""
    return int(user["sub"])
