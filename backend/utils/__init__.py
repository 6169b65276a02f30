from .formatting import escape_like, formatear_fecha, now_local
from .validacion import ValidacionError, normalizar_actividad, validar_actividad

__all__ = [
    'escape_like',
    'formatear_fecha',
    'now_local',
    'ValidacionError',
    'normalizar_actividad',
    'validar_actividad',
]
