"""
Pytest configuration: the app runs against an in-memory SQLite database
that is rebuilt for every test.
"""
import asyncio
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="reenvasado-logs-")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "Europe/Madrid"

import pytest
from fastapi.testclient import TestClient

from cliente.api import SIGNED_IN, SIGNED_OUT, ErrorAlmacen
from database import Base, SessionLocal, engine
import main
from models.medicamento_metodo import MedicamentoMetodo
from models.medicamentos import Medicamento
from models.metodo_reenvasado import MetodoReenvasado


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def catalogo():
    """Paracetamol (two methods), Ibuprofeno (one method), Omeprazol (none)."""
    session = SessionLocal()
    try:
        session.add_all([
            MetodoReenvasado(id=5, tipo_reenvasado="Blister"),
            MetodoReenvasado(id=6, tipo_reenvasado="Sachet"),
            Medicamento(codigo_sap=1001, nombre_medicamento="Paracetamol 500mg", principio_activo="Paracetamol"),
            Medicamento(codigo_sap=1002, nombre_medicamento="Ibuprofeno 600mg", principio_activo="Ibuprofeno"),
            Medicamento(codigo_sap=1003, nombre_medicamento="Omeprazol 20mg", principio_activo=None),
        ])
        session.flush()
        session.add_all([
            MedicamentoMetodo(codigo_sap=1001, metodo_id=5),
            MedicamentoMetodo(codigo_sap=1001, metodo_id=6),
            MedicamentoMetodo(codigo_sap=1002, metodo_id=5),
        ])
        session.commit()
    finally:
        session.close()
    return {"paracetamol": 1001, "ibuprofeno": 1002, "omeprazol": 1003, "blister": 5, "sachet": 6}


def sign_in(client, email="farmacia@hospital.es", password="secreto123"):
    client.post("/auth/signup", json={"email": email, "password": password})
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return sign_in(client)


def actividad_valida(**overrides):
    payload = {
        "codigo_sap": 1001,
        "metodo_id": 5,
        "cantidad": 100,
        "cantidad_final": 95,
        "lote_original": "L2024A",
        "caducidad_original": "2025-01-01",
        "caducidad_reenvasado": "2025-02-01",
        "incidencias": "",
    }
    payload.update(overrides)
    return payload


PARACETAMOL = {
    "codigo_sap": 1001,
    "nombre_medicamento": "Paracetamol 500mg",
    "principio_activo": "Paracetamol",
    "metodos": [
        {"metodo_id": 5, "tipo_reenvasado": "Blister"},
        {"metodo_id": 6, "tipo_reenvasado": "Sachet"},
    ],
}

IBUPROFENO = {
    "codigo_sap": 1002,
    "nombre_medicamento": "Ibuprofeno 600mg",
    "principio_activo": "Ibuprofeno",
    "metodos": [{"metodo_id": 5, "tipo_reenvasado": "Blister"}],
}


class FakeApi:
    """In-memory stand-in for ReenvasadoApi that records every call."""

    def __init__(self):
        self.sesion = {"user_id": 1, "email": "farmacia@hospital.es", "expires_at": "2030-01-01T00:00:00Z"}
        self.error = None
        self.llamadas = []
        self.resultados_busqueda = []
        self.catalogo = []
        self.historial_items = []
        self._listeners = []

    def on_auth_state_change(self, callback):
        self._listeners.append(callback)
        return lambda: self._listeners.remove(callback)

    def _notify(self, evento, sesion):
        for callback in list(self._listeners):
            callback(evento, sesion)

    def _fallar_si_toca(self):
        if self.error is not None:
            raise self.error

    async def get_session(self):
        self.llamadas.append(("get_session",))
        return self.sesion

    async def sign_up(self, email, password):
        self.llamadas.append(("sign_up", email))
        self._fallar_si_toca()
        return "Registro OK."

    async def sign_in(self, email, password):
        self.llamadas.append(("sign_in", email))
        self._fallar_si_toca()
        self.sesion = {"user_id": 1, "email": email, "expires_at": "2030-01-01T00:00:00Z"}
        self._notify(SIGNED_IN, self.sesion)
        return self.sesion

    async def sign_out(self):
        self.llamadas.append(("sign_out",))
        self._fallar_si_toca()
        self.sesion = None
        self._notify(SIGNED_OUT, None)

    async def buscar_medicamentos(self, texto, limite=20):
        self.llamadas.append(("buscar_medicamentos", texto, limite))
        self._fallar_si_toca()
        return self.resultados_busqueda

    async def listar_catalogo(self, texto="", pagina=0, tamano=50):
        self.llamadas.append(("listar_catalogo", texto, pagina, tamano))
        self._fallar_si_toca()
        items = self.catalogo[pagina * tamano:(pagina + 1) * tamano]
        return {"items": items, "pagina": pagina, "tamano": tamano, "hay_siguiente": len(items) == tamano}

    async def registrar_actividad(self, payload):
        self.llamadas.append(("registrar_actividad", payload))
        self._fallar_si_toca()
        return {"id": 1, **payload}

    async def historial(self, limite=200):
        self.llamadas.append(("historial", limite))
        self._fallar_si_toca()
        return self.historial_items

    def llamadas_a(self, nombre):
        return [c for c in self.llamadas if c[0] == nombre]


class PuertaApi(FakeApi):
    """FakeApi whose history, catalog and insert calls wait for ``abrir()`` while closed."""

    def __init__(self):
        super().__init__()
        self.cerrada = False
        self._puerta = asyncio.Event()

    def cerrar(self):
        self.cerrada = True
        self._puerta = asyncio.Event()

    def abrir(self):
        self.cerrada = False
        self._puerta.set()

    async def _esperar(self):
        if self.cerrada:
            await self._puerta.wait()

    async def listar_catalogo(self, texto="", pagina=0, tamano=50):
        await self._esperar()
        return await super().listar_catalogo(texto, pagina=pagina, tamano=tamano)

    async def registrar_actividad(self, payload):
        await self._esperar()
        return await super().registrar_actividad(payload)

    async def historial(self, limite=200):
        await self._esperar()
        return await super().historial(limite=limite)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def error_almacen():
    return ErrorAlmacen("connection refused", status_code=None)
