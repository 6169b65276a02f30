from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from models.medicamento_metodo import MedicamentoMetodo
from models.medicamentos import Medicamento
from models.metodo_reenvasado import MetodoReenvasado
from utils.formatting import escape_like

MIN_BUSQUEDA = 2


def _filtro_texto(query, texto: str):
    """Case-insensitive substring match on name OR active ingredient."""
    patron = f"%{escape_like(texto)}%"
    return query.filter(
        or_(
            Medicamento.nombre_medicamento.ilike(patron, escape="\\"),
            Medicamento.principio_activo.ilike(patron, escape="\\"),
        )
    )


def _base_query(db: Session):
    return (
        db.query(Medicamento)
        .options(selectinload(Medicamento.metodos).joinedload(MedicamentoMetodo.metodo_reenvasado))
        .order_by(Medicamento.nombre_medicamento.asc(), Medicamento.codigo_sap.asc())
    )


def get_medicamento(db: Session, codigo_sap: int):
    return _base_query(db).filter(Medicamento.codigo_sap == codigo_sap).first()


def list_medicamentos(db: Session, texto: Optional[str] = None, skip: int = 0, limit: int = 50):
    """Catalog page: any non-blank text filters, range pagination by offset."""
    query = _base_query(db)
    texto = (texto or "").strip()
    if texto:
        query = _filtro_texto(query, texto)
    return query.offset(skip).limit(limit).all()


def search_medicamentos(db: Session, texto: Optional[str], limit: int = 20):
    """Incremental search. Queries under MIN_BUSQUEDA characters never reach the database."""
    texto = (texto or "").strip()
    if len(texto) < MIN_BUSQUEDA:
        return []
    return _filtro_texto(_base_query(db), texto).limit(limit).all()


def list_metodos(db: Session):
    return db.query(MetodoReenvasado).order_by(MetodoReenvasado.tipo_reenvasado.asc()).all()


def metodo_aplicable(db: Session, codigo_sap: int, metodo_id: int) -> bool:
    return db.query(MedicamentoMetodo).filter(
        MedicamentoMetodo.codigo_sap == codigo_sap,
        MedicamentoMetodo.metodo_id == metodo_id,
    ).first() is not None
