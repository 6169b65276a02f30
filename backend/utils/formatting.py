import os
from datetime import datetime
from typing import Optional, Union

import pytz
from dotenv import load_dotenv

load_dotenv()

# Timestamps are stored timezone-aware; the pharmacy service runs in Spain.
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Europe/Madrid")


def now_local() -> datetime:
    return datetime.now(pytz.timezone(APP_TIMEZONE))


def formatear_fecha(valor: Union[str, datetime, None]) -> str:
    """
    Render an event timestamp in the service timezone as ``dd/mm/YYYY HH:MM:SS``.
    Naive values are taken as already in the service timezone (SQLite drops
    the offset on storage). Values that cannot be parsed are returned untouched.
    """
    if valor is None:
        return ""
    if isinstance(valor, str):
        try:
            valor = datetime.fromisoformat(valor)
        except ValueError:
            return valor
    if valor.tzinfo is None:
        valor = pytz.timezone(APP_TIMEZONE).localize(valor)
    return valor.astimezone(pytz.timezone(APP_TIMEZONE)).strftime("%d/%m/%Y %H:%M:%S")


def escape_like(texto: Optional[str]) -> str:
    """Escape LIKE wildcards so user text is matched literally (escape char is a backslash)."""
    if not texto:
        return ""
    return texto.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
