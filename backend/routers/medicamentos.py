from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
import crud.medicamentos as crud_medicamentos
from schemas.medicamentos import CatalogoPagina, Medicamento as MedicamentoSchema

router = APIRouter(prefix="/medicamentos", tags=["medicamentos"])
logger = logging.getLogger("medicamentos")

PAGE_SIZE = 50


@router.get("/", response_model=CatalogoPagina)
def get_catalogo(
    q: Optional[str] = None,
    pagina: int = Query(0, ge=0),
    tamano: int = Query(PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Paginated catalog ordered by name, optionally filtered by name or active ingredient."""
    skip = pagina * tamano
    items = crud_medicamentos.list_medicamentos(db, texto=q, skip=skip, limit=tamano)
    return CatalogoPagina(
        items=items,
        pagina=pagina,
        tamano=tamano,
        desde=skip + 1,
        hasta=skip + len(items),
        hay_siguiente=len(items) == tamano,
    )


@router.get("/buscar", response_model=List[MedicamentoSchema])
def buscar_medicamentos(
    q: Optional[str] = None,
    limite: int = Query(20, ge=1, le=50),
    db: Session = Depends(get_db),
):
    """Search by name or active ingredient. Fewer than two characters returns nothing."""
    return crud_medicamentos.search_medicamentos(db, q, limit=limite)


@router.get("/{codigo_sap}", response_model=MedicamentoSchema)
def get_medicamento(codigo_sap: int, db: Session = Depends(get_db)):
    db_medicamento = crud_medicamentos.get_medicamento(db, codigo_sap)
    if db_medicamento is None:
        raise HTTPException(status_code=404, detail="Medicamento no encontrado.")
    return db_medicamento
