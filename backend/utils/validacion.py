"""
Validation of repackaging events.

The same rules guard the API and both recording screens, in this order,
and the first failing rule wins:

1. a medication is selected
2. a repackaging method is selected
3. the original lot is not blank
4. both expiry dates are present
5. the initial quantity is greater than zero
6. the final quantity is within [0, initial quantity]
7. the repackaged expiry is not earlier than the original expiry
8. incident notes fit in 255 characters
"""

from datetime import date
from typing import Optional, Union

INCIDENCIAS_MAX = 255

FechaEntrada = Union[date, str, None]


class ValidacionError(ValueError):
    """A locally detected rule violation. ``mensaje`` is shown to the user as is."""

    def __init__(self, mensaje: str):
        super().__init__(mensaje)
        self.mensaje = mensaje


def _a_fecha(valor: FechaEntrada, nombre: str) -> Optional[date]:
    if valor is None:
        return None
    if isinstance(valor, date):
        return valor
    texto = str(valor).strip()
    if not texto:
        return None
    try:
        return date.fromisoformat(texto)
    except ValueError:
        raise ValidacionError(f"La {nombre} no es una fecha válida.")


def validar_actividad(
    codigo_sap: Optional[int],
    metodo_id: Optional[int],
    cantidad: int,
    cantidad_final: int,
    lote_original: Optional[str],
    caducidad_original: FechaEntrada,
    caducidad_reenvasado: FechaEntrada,
    incidencias: Optional[str] = None,
) -> None:
    """Raise ValidacionError with the first rule the event breaks."""
    if not codigo_sap:
        raise ValidacionError("Selecciona un medicamento.")
    if not metodo_id:
        raise ValidacionError("Selecciona un método de reenvasado.")
    if not (lote_original or "").strip():
        raise ValidacionError("Indica el lote original.")

    cad_original = _a_fecha(caducidad_original, "caducidad original")
    if cad_original is None:
        raise ValidacionError("Indica la caducidad original.")
    cad_reenvasado = _a_fecha(caducidad_reenvasado, "caducidad reenvasado")
    if cad_reenvasado is None:
        raise ValidacionError("Indica la caducidad reenvasado.")

    if cantidad is None or cantidad <= 0:
        raise ValidacionError("La cantidad inicial debe ser > 0.")
    if cantidad_final is None or cantidad_final < 0:
        raise ValidacionError("La cantidad final no puede ser negativa.")
    if cantidad_final > cantidad:
        raise ValidacionError("La cantidad final no puede ser mayor que la inicial.")

    if cad_reenvasado < cad_original:
        raise ValidacionError("La caducidad reenvasado no puede ser anterior a la original.")

    if incidencias and len(incidencias.strip()) > INCIDENCIAS_MAX:
        raise ValidacionError(f"Las incidencias no pueden superar {INCIDENCIAS_MAX} caracteres.")


def normalizar_actividad(
    codigo_sap: int,
    metodo_id: int,
    cantidad: int,
    cantidad_final: int,
    lote_original: str,
    caducidad_original: FechaEntrada,
    caducidad_reenvasado: FechaEntrada,
    incidencias: Optional[str] = None,
) -> dict:
    """
    Build the insert payload for an already validated event: lot trimmed,
    dates as ISO strings, blank incident notes stored as None.
    """
    nota = (incidencias or "").strip()
    return {
        "codigo_sap": codigo_sap,
        "metodo_id": metodo_id,
        "cantidad": cantidad,
        "cantidad_final": cantidad_final,
        "lote_original": lote_original.strip(),
        "caducidad_original": _a_fecha(caducidad_original, "caducidad original").isoformat(),
        "caducidad_reenvasado": _a_fecha(caducidad_reenvasado, "caducidad reenvasado").isoformat(),
        "incidencias": nota or None,
    }
