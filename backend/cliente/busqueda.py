import logging
from typing import Any, Dict, List, Optional

from cliente.api import ErrorAlmacen

logger = logging.getLogger(__name__)

MIN_CARACTERES = 2


class BuscadorMedicamentos:
    """
    Incremental medication search.

    Every call to ``buscar`` takes a new generation number; a response is
    applied only if its generation is still the latest when it arrives, so
    a slow answer to an old query never overwrites a newer one.
    """

    def __init__(self, api, limite: int = 20, min_caracteres: int = MIN_CARACTERES):
        self.api = api
        self.limite = limite
        self.min_caracteres = min_caracteres
        self.resultados: List[Dict[str, Any]] = []
        self.cargando = False
        self.error_msg = ""
        self._generacion = 0

    async def buscar(self, q: Optional[str]) -> bool:
        """Returns False when the response was discarded as stale."""
        texto = (q or "").strip()
        self._generacion += 1
        generacion = self._generacion

        if len(texto) < self.min_caracteres:
            self.resultados = []
            self.cargando = False
            return True

        self.cargando = True
        self.error_msg = ""
        try:
            datos = await self.api.buscar_medicamentos(texto, limite=self.limite)
        except ErrorAlmacen as e:
            if generacion != self._generacion:
                return False
            self.error_msg = e.mensaje
            self.resultados = []
            self.cargando = False
            return True

        if generacion != self._generacion:
            logger.debug(f"Discarding stale results for '{texto}'")
            return False
        self.resultados = datos or []
        self.cargando = False
        return True


class SeleccionMedicamento:
    """The chosen medication and repackaging method."""

    def __init__(self):
        self.medicamento: Optional[Dict[str, Any]] = None
        self.metodo_id: Optional[int] = None

    @property
    def metodos(self) -> List[Dict[str, Any]]:
        if not self.medicamento:
            return []
        return self.medicamento.get("metodos") or []

    @property
    def codigo_sap(self) -> Optional[int]:
        return self.medicamento["codigo_sap"] if self.medicamento else None

    @property
    def metodo_habilitado(self) -> bool:
        return self.medicamento is not None

    def seleccionar(self, medicamento: Optional[Dict[str, Any]]) -> None:
        # A medication with a single method gets it preselected.
        self.medicamento = medicamento
        self.metodo_id = None
        if len(self.metodos) == 1:
            self.metodo_id = self.metodos[0]["metodo_id"]

    def elegir_metodo(self, metodo_id: Optional[int]) -> None:
        if not self.metodo_habilitado:
            raise ValueError("Selecciona primero un medicamento.")
        if metodo_id is not None and metodo_id not in {m["metodo_id"] for m in self.metodos}:
            raise ValueError(f"El método {metodo_id} no corresponde al medicamento.")
        self.metodo_id = metodo_id

    def limpiar(self) -> None:
        self.medicamento = None
        self.metodo_id = None
