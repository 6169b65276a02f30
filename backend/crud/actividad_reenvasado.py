from datetime import date
import logging

from sqlalchemy.orm import Session, joinedload

from models.actividad_reenvasado import ActividadReenvasado
from schemas.actividad_reenvasado import ActividadReenvasadoCreate
from utils.validacion import normalizar_actividad, validar_actividad

logger = logging.getLogger(__name__)

HISTORIAL_MAX = 200


def create_actividad(db: Session, actividad: ActividadReenvasadoCreate, user_id: int):
    """
    Validates and records one repackaging event owned by ``user_id``.
    Raises ValidacionError before touching the session when a rule fails.
    """
    campos = actividad.model_dump()
    validar_actividad(**campos)
    payload = normalizar_actividad(**campos)

    db_actividad = ActividadReenvasado(
        codigo_sap=payload["codigo_sap"],
        metodo_id=payload["metodo_id"],
        cantidad=payload["cantidad"],
        cantidad_final=payload["cantidad_final"],
        lote_original=payload["lote_original"],
        caducidad_original=date.fromisoformat(payload["caducidad_original"]),
        caducidad_reenvasado=date.fromisoformat(payload["caducidad_reenvasado"]),
        incidencias=payload["incidencias"],
        user_id=user_id,
    )
    db.add(db_actividad)
    db.commit()
    db.refresh(db_actividad)
    return db_actividad


def get_historial(db: Session, user_id: int, limit: int = HISTORIAL_MAX):
    """
    Most recent events of ``user_id`` first, with medication and method
    loaded for display.
    """
    limit = max(1, min(limit, HISTORIAL_MAX))
    return (
        db.query(ActividadReenvasado)
        .options(
            joinedload(ActividadReenvasado.medicamento),
            joinedload(ActividadReenvasado.metodo_reenvasado),
        )
        .filter(ActividadReenvasado.user_id == user_id)
        .order_by(ActividadReenvasado.fecha.desc(), ActividadReenvasado.id.desc())
        .limit(limit)
        .all()
    )
