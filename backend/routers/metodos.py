from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from database import get_db
import crud.medicamentos as crud_medicamentos
from schemas.medicamentos import MetodoReenvasado as MetodoReenvasadoSchema

router = APIRouter(prefix="/metodos", tags=["metodos"])


@router.get("/", response_model=List[MetodoReenvasadoSchema])
def get_metodos(db: Session = Depends(get_db)):
    """All repackaging methods, ordered by label."""
    return crud_medicamentos.list_metodos(db)
