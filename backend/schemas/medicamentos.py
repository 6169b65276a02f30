from pydantic import BaseModel
from typing import List, Optional


class MetodoReenvasado(BaseModel):
    id: int
    tipo_reenvasado: str

    class Config:
        from_attributes = True


class MedicamentoMetodo(BaseModel):
    metodo_id: int
    tipo_reenvasado: Optional[str] = None  # None when the method row is missing

    class Config:
        from_attributes = True


class MedicamentoBase(BaseModel):
    codigo_sap: int
    nombre_medicamento: str
    principio_activo: Optional[str] = None


class Medicamento(MedicamentoBase):
    metodos: List[MedicamentoMetodo] = []

    class Config:
        from_attributes = True


class CatalogoPagina(BaseModel):
    items: List[Medicamento]
    pagina: int
    tamano: int
    desde: int  # 1-based position of the first row shown
    hasta: int
    hay_siguiente: bool
