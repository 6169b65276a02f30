from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from database import get_db
import crud.actividad_reenvasado as crud_actividad
import crud.medicamentos as crud_medicamentos
from schemas.actividad_reenvasado import ActividadReenvasado, ActividadReenvasadoCreate
from utils.auth_utils import get_current_user, get_user_identifier
from utils.tenancy import scope_to_user
from utils.validacion import ValidacionError, validar_actividad

router = APIRouter(prefix="/reenvasado", tags=["reenvasado"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=ActividadReenvasado, status_code=status.HTTP_201_CREATED)
def create_actividad(
    actividad: ActividadReenvasadoCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    """
    Records one repackaging event for the signed-in user.
    Rule violations come back as 400 with the first failing rule's message.
    """
    user_id = get_user_identifier(user)
    scope_to_user(db, user_id)

    try:
        validar_actividad(**actividad.model_dump())
    except ValidacionError as e:
        raise HTTPException(status_code=400, detail=e.mensaje)

    if crud_medicamentos.get_medicamento(db, actividad.codigo_sap) is None:
        raise HTTPException(status_code=400, detail="Medicamento no encontrado.")
    if not crud_medicamentos.metodo_aplicable(db, actividad.codigo_sap, actividad.metodo_id):
        raise HTTPException(status_code=400, detail="El método seleccionado no corresponde al medicamento.")

    try:
        nueva = crud_actividad.create_actividad(db, actividad, user_id=user_id)
    except ValidacionError as e:
        raise HTTPException(status_code=400, detail=e.mensaje)
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error recording activity for user {user_id}: {e.orig}")
        raise HTTPException(status_code=400, detail=str(e.orig))
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error recording activity for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Activity {nueva.id} (SAP {nueva.codigo_sap}, method {nueva.metodo_id}) recorded by user {user_id}")
    return nueva
