"""
Async HTTP client for the Reenvasado API.

Holds the access token of the current session and tells subscribers when
the session starts or ends, so screens can react to a sign-out that
happened somewhere else.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional[Dict[str, Any]]], None]


class ErrorAlmacen(Exception):
    """An error reported by the backend (or the network), shown to the user verbatim."""

    def __init__(self, mensaje: str, status_code: Optional[int] = None):
        super().__init__(mensaje)
        self.mensaje = mensaje
        self.status_code = status_code


def _mensaje_de(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if not isinstance(body, dict):
        return response.text or response.reason_phrase
    detail = body.get("detail")
    if isinstance(detail, list):
        # FastAPI request validation errors
        return "; ".join(str(d.get("msg", d)) for d in detail)
    return str(detail) if detail else response.reason_phrase


class ReenvasadoApi:
    def __init__(self, base_url: str = "http://localhost:8000", transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 30.0):
        self.client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.access_token: Optional[str] = None
        self._listeners: List[AuthListener] = []

    async def aclose(self) -> None:
        await self.client.aclose()

    # --- session notifications -------------------------------------------

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Subscribe to SIGNED_IN / SIGNED_OUT. Returns the unsubscribe handle."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, evento: str, sesion: Optional[Dict[str, Any]]) -> None:
        for callback in list(self._listeners):
            callback(evento, sesion)

    def _clear_session(self) -> None:
        if self.access_token is None:
            return
        self.access_token = None
        self._notify(SIGNED_OUT, None)

    # --- transport -------------------------------------------------------

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        try:
            response = await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ErrorAlmacen(str(e) or e.__class__.__name__)

        if response.status_code == 401:
            self._clear_session()
        if response.is_error:
            raise ErrorAlmacen(_mensaje_de(response), response.status_code)
        return response.json()

    # --- identity --------------------------------------------------------

    async def get_session(self) -> Optional[Dict[str, Any]]:
        """The current session, or None when signed out (or the server rejects the token)."""
        if not self.access_token:
            return None
        try:
            return await self._request("GET", "/auth/session")
        except ErrorAlmacen as e:
            if e.status_code == 401:
                return None
            raise

    async def sign_up(self, email: str, password: str) -> str:
        datos = await self._request("POST", "/auth/signup", json={"email": email, "password": password})
        return datos["mensaje"]

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        datos = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.access_token = datos["access_token"]
        sesion = await self._request("GET", "/auth/session")
        self._notify(SIGNED_IN, sesion)
        return sesion

    async def sign_out(self) -> None:
        if self.access_token:
            try:
                await self._request("POST", "/auth/logout")
            except ErrorAlmacen as e:
                if e.status_code != 401:
                    raise
        self._clear_session()

    # --- data ------------------------------------------------------------

    async def buscar_medicamentos(self, texto: str, limite: int = 20) -> List[Dict[str, Any]]:
        return await self._request("GET", "/medicamentos/buscar", params={"q": texto, "limite": limite})

    async def listar_catalogo(self, texto: str = "", pagina: int = 0, tamano: int = 50) -> Dict[str, Any]:
        params = {"pagina": pagina, "tamano": tamano}
        if texto:
            params["q"] = texto
        return await self._request("GET", "/medicamentos/", params=params)

    async def listar_metodos(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/metodos/")

    async def registrar_actividad(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/reenvasado/", json=payload)

    async def historial(self, limite: int = 200) -> List[Dict[str, Any]]:
        return await self._request("GET", "/historial/", params={"limite": limite})
