from datetime import date, datetime

import pytest

from utils.formatting import formatear_fecha
from utils.validacion import ValidacionError, normalizar_actividad, validar_actividad


def campos(**overrides):
    valores = {
        "codigo_sap": 1001,
        "metodo_id": 5,
        "cantidad": 100,
        "cantidad_final": 95,
        "lote_original": "L2024A",
        "caducidad_original": "2025-01-01",
        "caducidad_reenvasado": "2025-02-01",
        "incidencias": "",
    }
    valores.update(overrides)
    return valores


def mensaje_de(**overrides):
    with pytest.raises(ValidacionError) as excinfo:
        validar_actividad(**campos(**overrides))
    return excinfo.value.mensaje


def test_valid_event_passes():
    validar_actividad(**campos())


def test_dates_accept_date_objects():
    validar_actividad(**campos(caducidad_original=date(2025, 1, 1), caducidad_reenvasado=date(2025, 1, 1)))


@pytest.mark.parametrize("overrides, mensaje", [
    ({"codigo_sap": None}, "Selecciona un medicamento."),
    ({"metodo_id": None}, "Selecciona un método de reenvasado."),
    ({"lote_original": "   "}, "Indica el lote original."),
    ({"caducidad_original": ""}, "Indica la caducidad original."),
    ({"caducidad_reenvasado": None}, "Indica la caducidad reenvasado."),
    ({"caducidad_original": "   "}, "Indica la caducidad original."),
    ({"caducidad_reenvasado": " \t"}, "Indica la caducidad reenvasado."),
    ({"cantidad": 0}, "La cantidad inicial debe ser > 0."),
    ({"cantidad": -5, "cantidad_final": -10}, "La cantidad inicial debe ser > 0."),
    ({"cantidad_final": -1}, "La cantidad final no puede ser negativa."),
    ({"cantidad_final": 101}, "La cantidad final no puede ser mayor que la inicial."),
    ({"caducidad_reenvasado": "2024-12-31"}, "La caducidad reenvasado no puede ser anterior a la original."),
    ({"incidencias": "x" * 256}, "Las incidencias no pueden superar 255 caracteres."),
])
def test_each_rule_has_its_message(overrides, mensaje):
    assert mensaje_de(**overrides) == mensaje


def test_first_failing_rule_wins():
    # Everything is wrong; the medication rule comes first
    assert mensaje_de(codigo_sap=None, metodo_id=None, lote_original="", cantidad=0) == "Selecciona un medicamento."
    assert mensaje_de(lote_original="", cantidad=0, cantidad_final=5) == "Indica el lote original."
    assert mensaje_de(cantidad=0, caducidad_reenvasado="2020-01-01") == "La cantidad inicial debe ser > 0."


def test_final_quantity_boundaries_are_inclusive():
    validar_actividad(**campos(cantidad_final=0))
    validar_actividad(**campos(cantidad_final=100))


def test_invalid_date_text_is_rejected():
    assert mensaje_de(caducidad_original="31/12/2025") == "La caducidad original no es una fecha válida."


def test_normalizar_trims_and_nulls_blank_incident():
    payload = normalizar_actividad(**campos(lote_original="  L2024A ", incidencias="   "))
    assert payload == {
        "codigo_sap": 1001,
        "metodo_id": 5,
        "cantidad": 100,
        "cantidad_final": 95,
        "lote_original": "L2024A",
        "caducidad_original": "2025-01-01",
        "caducidad_reenvasado": "2025-02-01",
        "incidencias": None,
    }


def test_normalizar_keeps_incident_text():
    payload = normalizar_actividad(**campos(incidencias=" blister roto "))
    assert payload["incidencias"] == "blister roto"


def test_formatear_fecha_takes_naive_values_as_local_time():
    assert formatear_fecha(datetime(2024, 6, 1, 10, 30)) == "01/06/2024 10:30:00"
    assert formatear_fecha("2024-06-01T10:30:00") == "01/06/2024 10:30:00"
    # explicit offsets are converted (Madrid is UTC+2 in summer)
    assert formatear_fecha("2024-06-01T08:30:00+00:00") == "01/06/2024 10:30:00"
    assert formatear_fecha("no es fecha") == "no es fecha"
