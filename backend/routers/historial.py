from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
import crud.actividad_reenvasado as crud_actividad
from schemas.actividad_reenvasado import ActividadHistorial
from utils.auth_utils import get_current_user, get_user_identifier
from utils.tenancy import scope_to_user

router = APIRouter(prefix="/historial", tags=["historial"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[ActividadHistorial])
def get_historial(
    limite: int = Query(crud_actividad.HISTORIAL_MAX, ge=1),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    """
    The signed-in user's repackaging events, newest first (at most 200),
    with medication and method details.
    """
    user_id = get_user_identifier(user)
    scope_to_user(db, user_id)
    try:
        return crud_actividad.get_historial(db, user_id, limit=limite)
    except SQLAlchemyError as e:
        logger.exception(f"Error loading history: {e}")
        raise HTTPException(status_code=500, detail=str(e))
