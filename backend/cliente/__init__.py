"""
Screen workflows for the repackaging front end.

Each screen is a UI-agnostic, async state object: a presentation layer
binds its widgets to the attributes and awaits the actions. Everything
talks to the API through ``cliente.api.ReenvasadoApi``.
"""

from cliente.api import SIGNED_IN, SIGNED_OUT, ErrorAlmacen, ReenvasadoApi
from cliente.busqueda import BuscadorMedicamentos, SeleccionMedicamento
from cliente.formulario import FormularioReenvasado
from cliente.pantallas import (
    CatalogoPantalla,
    HistorialPantalla,
    LoginPantalla,
    RegistroPantalla,
    SesionGate,
)

__all__ = [
    'BuscadorMedicamentos', 'CatalogoPantalla', 'ErrorAlmacen', 'FormularioReenvasado',
    'HistorialPantalla', 'LoginPantalla', 'ReenvasadoApi', 'RegistroPantalla',
    'SeleccionMedicamento', 'SesionGate', 'SIGNED_IN', 'SIGNED_OUT',
]
