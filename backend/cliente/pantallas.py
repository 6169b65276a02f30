"""
Screens of the repackaging front end: login, catalog, recorder and history.

Navigation is delegated to a ``navegar(ruta)`` callable supplied by the
presentation layer (it replaces the current route).
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from cliente.api import SIGNED_OUT, ErrorAlmacen
from cliente.busqueda import BuscadorMedicamentos
from cliente.formulario import FormularioReenvasado
from utils.formatting import formatear_fecha

logger = logging.getLogger(__name__)

RUTA_LOGIN = "/login"
RUTA_REENVASADO = "/reenvasado"
RUTA_HISTORIAL = "/historial"

Navegar = Callable[[str], None]


class SesionGate:
    """Keeps protected screens behind an active session."""

    def __init__(self, api, navegar: Navegar):
        self.api = api
        self.navegar = navegar
        self.comprobando = True
        self._unsubscribe: Optional[Callable[[], None]] = None

    async def comprobar(self) -> bool:
        try:
            sesion = await self.api.get_session()
        except ErrorAlmacen as e:
            logger.warning(f"Could not check session: {e.mensaje}")
            sesion = None
        if not sesion:
            self.navegar(RUTA_LOGIN)
            return False
        self.comprobando = False
        return True

    def vigilar(self) -> None:
        """Redirect to login as soon as the session ends, e.g. signed out elsewhere."""
        def on_change(evento: str, sesion: Optional[Dict[str, Any]]) -> None:
            if evento == SIGNED_OUT or sesion is None:
                self.navegar(RUTA_LOGIN)

        self.cerrar()
        self._unsubscribe = self.api.on_auth_state_change(on_change)

    def cerrar(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


class LoginPantalla:
    def __init__(self, api, navegar: Navegar):
        self.api = api
        self.navegar = navegar
        self.email = ""
        self.password = ""
        self.msg = ""
        self.cargando = False

    async def montar(self) -> None:
        # Already signed in: straight to the recorder
        if await self.api.get_session():
            self.navegar(RUTA_REENVASADO)

    async def registrarse(self) -> None:
        self.cargando = True
        self.msg = ""
        try:
            await self.api.sign_up(self.email, self.password)
        except ErrorAlmacen as e:
            self.msg = f"❌ Error registro: {e.mensaje}"
        else:
            self.msg = "✅ Registro OK. Si se pide confirmación por email, revisa tu correo."
        finally:
            self.cargando = False

    async def entrar(self) -> None:
        self.cargando = True
        self.msg = ""
        try:
            await self.api.sign_in(self.email, self.password)
        except ErrorAlmacen as e:
            self.msg = f"❌ Error login: {e.mensaje}"
            return
        finally:
            self.cargando = False
        self.navegar(RUTA_REENVASADO)

    async def salir(self) -> None:
        self.cargando = True
        self.msg = ""
        try:
            await self.api.sign_out()
        except ErrorAlmacen as e:
            self.msg = f"❌ Error logout: {e.mensaje}"
        else:
            self.msg = "👋 Sesión cerrada"
        finally:
            self.cargando = False


class CatalogoPantalla:
    """Paginated catalog with an inline event form."""

    PAGE_SIZE = 50

    def __init__(self, api, tamano: int = PAGE_SIZE):
        self.api = api
        self.tamano = tamano
        self.q = ""
        self.pagina = 0
        self.medicamentos: List[Dict[str, Any]] = []
        self.cargando = True
        self.error_msg = ""
        self.mostrar_formulario = False
        self.formulario = FormularioReenvasado(api)
        self._generacion = 0

    @property
    def desde(self) -> int:
        return self.pagina * self.tamano + 1

    @property
    def hasta(self) -> int:
        return self.pagina * self.tamano + len(self.medicamentos)

    @property
    def puede_anterior(self) -> bool:
        return self.pagina > 0 and not self.cargando

    @property
    def puede_siguiente(self) -> bool:
        return not self.cargando and len(self.medicamentos) >= self.tamano

    async def cargar(self) -> None:
        self._generacion += 1
        generacion = self._generacion
        self.cargando = True
        self.error_msg = ""
        try:
            datos = await self.api.listar_catalogo(self.q.strip(), pagina=self.pagina, tamano=self.tamano)
        except ErrorAlmacen as e:
            if generacion != self._generacion:
                return
            self.error_msg = e.mensaje
            self.medicamentos = []
        else:
            if generacion != self._generacion:
                return
            self.medicamentos = datos.get("items") or []
        self.cargando = False

    async def buscar(self, q: str) -> None:
        self.q = q
        self.pagina = 0
        await self.cargar()

    async def limpiar(self) -> None:
        await self.buscar("")

    async def siguiente(self) -> None:
        if not self.puede_siguiente:
            return
        self.pagina += 1
        await self.cargar()

    async def anterior(self) -> None:
        if not self.puede_anterior:
            return
        self.pagina -= 1
        await self.cargar()

    def alternar_formulario(self) -> None:
        self.mostrar_formulario = not self.mostrar_formulario

    def seleccionar_codigo(self, codigo_sap: Optional[int]) -> None:
        """Pick a medication of the current page by SAP code (None clears it)."""
        medicamento = None
        if codigo_sap is not None:
            medicamento = next((m for m in self.medicamentos if m["codigo_sap"] == codigo_sap), None)
            if medicamento is None:
                raise ValueError(f"SAP {codigo_sap} no está en la página actual.")
        self.formulario.seleccionar_medicamento(medicamento)

    async def guardar(self) -> bool:
        return await self.formulario.guardar()


class RegistroPantalla:
    """Search-driven picker plus the event form, for signed-in users only."""

    def __init__(self, api, navegar: Navegar, limite: int = 20):
        self.api = api
        self.navegar = navegar
        self.gate = SesionGate(api, navegar)
        self.buscador = BuscadorMedicamentos(api, limite=limite)
        self.formulario = FormularioReenvasado(api)
        self.q = ""

    @property
    def comprobando_sesion(self) -> bool:
        return self.gate.comprobando

    @property
    def error_msg(self) -> str:
        return self.formulario.error_msg or self.buscador.error_msg

    async def montar(self) -> bool:
        self.gate.vigilar()
        return await self.gate.comprobar()

    def desmontar(self) -> None:
        self.gate.cerrar()

    async def buscar(self, q: str) -> None:
        self.q = q
        if self.gate.comprobando:
            return
        await self.buscador.buscar(q)

    def seleccionar(self, medicamento: Dict[str, Any]) -> None:
        self.formulario.seleccionar_medicamento(medicamento)

    async def guardar(self) -> bool:
        return await self.formulario.guardar()

    def ver_historial(self) -> None:
        self.navegar(RUTA_HISTORIAL)

    async def salir(self) -> None:
        await self.api.sign_out()
        self.navegar(RUTA_LOGIN)


class HistorialPantalla:
    LIMITE = 200

    def __init__(self, api, navegar: Navegar):
        self.api = api
        self.navegar = navegar
        self.items: List[Dict[str, Any]] = []
        self.cargando = True
        self.error_msg = ""
        self._en_curso = False

    @property
    def estado(self) -> str:
        """Exactly one of: cargando, error, vacio, datos."""
        if self.cargando:
            return "cargando"
        if self.error_msg:
            return "error"
        if not self.items:
            return "vacio"
        return "datos"

    @property
    def puede_recargar(self) -> bool:
        return not self._en_curso

    async def cargar(self) -> None:
        if self._en_curso:
            return
        self._en_curso = True
        self.cargando = True
        self.error_msg = ""
        try:
            if not await SesionGate(self.api, self.navegar).comprobar():
                return
            try:
                datos = await self.api.historial(limite=self.LIMITE)
            except ErrorAlmacen as e:
                self.error_msg = e.mensaje
                self.items = []
            else:
                self.items = datos or []
            self.cargando = False
        finally:
            self._en_curso = False

    def volver(self) -> None:
        self.navegar(RUTA_REENVASADO)

    def filas(self) -> List[Dict[str, Any]]:
        filas = []
        for a in self.items:
            medicamento = a.get("medicamento") or {}
            metodo = a.get("metodo_reenvasado") or {}
            filas.append({
                "id": a["id"],
                "fecha": formatear_fecha(a.get("fecha")),
                "medicamento": medicamento.get("nombre_medicamento") or f"SAP {a['codigo_sap']}",
                "detalle": f"{medicamento.get('principio_activo') or '—'} · SAP {a['codigo_sap']}",
                "metodo": metodo.get("tipo_reenvasado") or "—",
                "cantidad": a["cantidad"],
                "cantidad_final": a["cantidad_final"],
                "lote_original": a["lote_original"],
                "caducidad_original": a["caducidad_original"],
                "caducidad_reenvasado": a["caducidad_reenvasado"],
                "incidencias": a.get("incidencias") or "—",
            })
        return filas
