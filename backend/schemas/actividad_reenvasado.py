from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime


class ActividadReenvasadoCreate(BaseModel):
    # Everything optional here: the ordered, user-facing checks live in
    # utils.validacion so the API and both recording screens agree on them.
    codigo_sap: Optional[int] = None
    metodo_id: Optional[int] = None
    cantidad: int = 0
    cantidad_final: int = 0
    lote_original: str = ""
    caducidad_original: Optional[date] = None
    caducidad_reenvasado: Optional[date] = None
    incidencias: Optional[str] = Field(default=None, max_length=255)


class ActividadReenvasado(BaseModel):
    id: int
    fecha: datetime
    codigo_sap: int
    metodo_id: int
    cantidad: int
    cantidad_final: int
    lote_original: str
    caducidad_original: date
    caducidad_reenvasado: date
    incidencias: Optional[str] = None

    class Config:
        from_attributes = True


class MedicamentoResumen(BaseModel):
    nombre_medicamento: str
    principio_activo: Optional[str] = None

    class Config:
        from_attributes = True


class MetodoResumen(BaseModel):
    tipo_reenvasado: str

    class Config:
        from_attributes = True


class ActividadHistorial(ActividadReenvasado):
    medicamento: Optional[MedicamentoResumen] = None
    metodo_reenvasado: Optional[MetodoResumen] = None
