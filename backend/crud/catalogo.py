from typing import Dict, Iterable, List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.medicamento_metodo import MedicamentoMetodo
from models.medicamentos import Medicamento
from models.metodo_reenvasado import MetodoReenvasado

logger = logging.getLogger(__name__)

SEPARADOR_METODOS = "|"


def _metodos_de(valor) -> List[str]:
    if valor is None:
        return []
    etiquetas = [m.strip() for m in str(valor).split(SEPARADOR_METODOS)]
    return [m for m in etiquetas if m]


def _get_or_create_metodo(db: Session, tipo: str, cache: Dict[str, MetodoReenvasado]) -> MetodoReenvasado:
    clave = tipo.lower()
    if clave in cache:
        return cache[clave]
    metodo = db.query(MetodoReenvasado).filter(func.lower(MetodoReenvasado.tipo_reenvasado) == clave).first()
    if metodo is None:
        metodo = MetodoReenvasado(tipo_reenvasado=tipo)
        db.add(metodo)
        db.flush()
    cache[clave] = metodo
    return metodo


def importar_catalogo(db: Session, filas: Iterable[dict]) -> Dict[str, int]:
    """
    Upsert medications and their repackaging methods.

    Each row needs ``codigo_sap`` and ``nombre_medicamento``; ``principio_activo``
    is optional and ``metodos`` holds method labels separated by ``|``. Methods
    are matched by label (case-insensitive) and created when missing. A
    medication's method list is replaced by the one in its row. Rows without
    a SAP code or name are skipped.
    """
    resumen = {"creados": 0, "actualizados": 0, "omitidos": 0, "metodos": 0}
    cache: Dict[str, MetodoReenvasado] = {}
    metodos_antes = db.query(MetodoReenvasado).count()

    for fila in filas:
        codigo: Optional[int]
        try:
            codigo = int(float(fila.get("codigo_sap")))
        except (TypeError, ValueError):
            codigo = None
        nombre = str(fila.get("nombre_medicamento") or "").strip()
        if not codigo or not nombre:
            logger.warning(f"Skipping catalog row without SAP code or name: {fila}")
            resumen["omitidos"] += 1
            continue

        principio = str(fila.get("principio_activo") or "").strip() or None
        medicamento = db.query(Medicamento).filter(Medicamento.codigo_sap == codigo).first()
        if medicamento is None:
            medicamento = Medicamento(codigo_sap=codigo)
            db.add(medicamento)
            resumen["creados"] += 1
        else:
            resumen["actualizados"] += 1
        medicamento.nombre_medicamento = nombre
        medicamento.principio_activo = principio

        metodos = [_get_or_create_metodo(db, tipo, cache) for tipo in _metodos_de(fila.get("metodos"))]
        deseados = {m.id for m in metodos}
        actuales = {rel.metodo_id for rel in medicamento.metodos}
        for rel in list(medicamento.metodos):
            if rel.metodo_id not in deseados:
                medicamento.metodos.remove(rel)
        for metodo_id in sorted(deseados - actuales):
            medicamento.metodos.append(MedicamentoMetodo(codigo_sap=codigo, metodo_id=metodo_id))
        db.flush()

    db.commit()
    resumen["metodos"] = db.query(MetodoReenvasado).count() - metodos_antes
    logger.info(f"Catalog import finished: {resumen}")
    return resumen
