import logging
from typing import Any, Dict, Optional

from cliente.api import ErrorAlmacen
from cliente.busqueda import SeleccionMedicamento
from utils.validacion import ValidacionError, normalizar_actividad, validar_actividad

logger = logging.getLogger(__name__)

MENSAJE_OK = "Actividad registrada correctamente."


class FormularioReenvasado:
    """Repackaging event form shared by the catalog and the recording screen."""

    def __init__(self, api):
        self.api = api
        self.seleccion = SeleccionMedicamento()
        self.guardando = False
        self.error_msg = ""
        self.ok_msg = ""
        self._valores_por_defecto()

    def _valores_por_defecto(self) -> None:
        self.cantidad = 0
        self.cantidad_final = 0
        self.lote_original = ""
        self.caducidad_original = ""  # YYYY-MM-DD
        self.caducidad_reenvasado = ""  # YYYY-MM-DD
        self.incidencias = ""

    def reset(self) -> None:
        self.seleccion.limpiar()
        self._valores_por_defecto()

    def seleccionar_medicamento(self, medicamento: Optional[Dict[str, Any]]) -> None:
        self._valores_por_defecto()
        self.seleccion.seleccionar(medicamento)

    def campos(self) -> Dict[str, Any]:
        return {
            "codigo_sap": self.seleccion.codigo_sap,
            "metodo_id": self.seleccion.metodo_id,
            "cantidad": self.cantidad,
            "cantidad_final": self.cantidad_final,
            "lote_original": self.lote_original,
            "caducidad_original": self.caducidad_original,
            "caducidad_reenvasado": self.caducidad_reenvasado,
            "incidencias": self.incidencias,
        }

    async def guardar(self) -> bool:
        """
        Validate and submit. A failing rule sets ``error_msg`` and nothing is
        sent; a store error is shown as reported. On success the form is
        cleared and ``ok_msg`` set.
        """
        if self.guardando:
            return False
        self.error_msg = ""
        self.ok_msg = ""

        campos = self.campos()
        try:
            validar_actividad(**campos)
        except ValidacionError as e:
            self.error_msg = e.mensaje
            return False

        self.guardando = True
        try:
            await self.api.registrar_actividad(normalizar_actividad(**campos))
        except ErrorAlmacen as e:
            self.error_msg = e.mensaje
            return False
        finally:
            self.guardando = False

        self.ok_msg = MENSAJE_OK
        self.reset()
        return True
