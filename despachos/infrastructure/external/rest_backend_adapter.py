# despachos/infrastructure/external/rest_backend_adapter.py
import logging
from decimal import Decimal
from typing import Any, List, Optional, Type, TypeVar

import requests
from pydantic import ValidationError as PydanticValidationError

from despachos.application.session import BackOfficeSession
from despachos.domain.exceptions import BackendError, SessionExpired
from despachos.domain.models.asset import Asset
from despachos.domain.models.base import DomainModel
from despachos.domain.models.daily_load import DailyLoad
from despachos.domain.models.order import Order
from despachos.domain.models.seller import Seller
from despachos.domain.ports.logistics_backend import LogisticsBackend

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=DomainModel)


class RestBackendAdapter(LogisticsBackend):
    """
    Adaptador del backend de logística vía REST (JSON camelCase).
    No reintenta: cualquier fallo se propaga como BackendError para que el
    usuario repita la acción.
    """

    def __init__(self, session: BackOfficeSession, http: Optional[requests.Session] = None):
        self.session = session
        self.http = http or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

    def _url(self, path: str) -> str:
        return f"{self.session.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _error_from_response(self, response: requests.Response, context: str) -> BackendError:
        status_code = response.status_code
        if status_code == 401:
            # Token vencido o inválido: se descarta la sesión
            self.session.clear()
            return SessionExpired()

        message = f"No se pudo completar la acción en {context}."
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            message = body["message"]
        elif status_code == 403:
            message = "No tienes permisos para realizar esta acción."
        return BackendError(message, status_code=status_code)

    def _request(self, method: str, path: str, context: str, **kwargs) -> Any:
        try:
            response = self.http.request(
                method,
                self._url(path),
                headers=self.session.auth_headers(),
                timeout=self.session.timeout,
                **kwargs
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            error = self._error_from_response(e.response, context)
            logger.error(f"Error HTTP en {context}: {e.response.status_code} - {error.message}")
            raise error from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error de red en {context}: {e}")
            raise BackendError(f"No se pudo completar la acción en {context}.") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Respuesta inválida del backend en {context}: {response.text[:200]}")
            raise BackendError(f"Respuesta inválida del backend en {context}.", response.status_code) from e

    @staticmethod
    def _as_list(data: Any) -> List[dict]:
        return data if isinstance(data, list) else []

    def _parse(self, model: Type[M], data: Any, context: str) -> M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Respuesta con formato inesperado en {context}: {e}")
            raise BackendError(f"Respuesta inválida del backend en {context}.") from e

    def _parse_list(self, model: Type[M], data: Any, context: str) -> List[M]:
        return [self._parse(model, row, context) for row in self._as_list(data)]

    # --- Lecturas ---

    def list_sellers(self) -> List[Seller]:
        data = self._request("GET", "/sellers", "listar heladeros")
        return self._parse_list(Seller, data, "listar heladeros")

    def list_orders(self) -> List[Order]:
        data = self._request("GET", "/orders", "listar pedidos")
        return self._parse_list(Order, data, "listar pedidos")

    def list_assets(self, scope: Optional[str] = None) -> List[Asset]:
        params = {"scope": scope} if scope else None
        data = self._request("GET", "/assets", "listar activos", params=params)
        return self._parse_list(Asset, data, "listar activos")

    def list_daily_loads(self) -> List[DailyLoad]:
        data = self._request("GET", "/daily-loads", "listar despachos")
        return self._parse_list(DailyLoad, data, "listar despachos")

    # --- Escrituras ---

    def create_daily_load(self, load: DailyLoad) -> DailyLoad:
        data = self._request("POST", "/daily-loads", "crear despacho", json=load.to_payload())
        logger.info(f"[{load.seller_id}] Despacho registrado para el pedido {load.order_id}.")
        return self._parse(DailyLoad, data, "crear despacho") if isinstance(data, dict) else load

    def close_daily_load(self, load_id: str, load: DailyLoad) -> DailyLoad:
        data = self._request("PUT", f"/daily-loads/{load_id}/close", "cerrar liquidación", json=load.to_payload())
        logger.info(f"[{load_id}] Liquidación procesada.")
        return self._parse(DailyLoad, data, "cerrar liquidación") if isinstance(data, dict) else load

    def register_payment(self, seller_id: str, amount: Decimal, note: Optional[str] = None) -> None:
        payload = {"amount": float(amount)}
        if note:
            payload["note"] = note
        self._request("POST", f"/sellers/{seller_id}/payment", "registrar pago", json=payload)
        logger.info(f"[{seller_id}] Pago registrado: {amount:.2f}")

    # --- Registro de activos ---

    def create_asset(self, asset: Asset) -> Asset:
        data = self._request("POST", "/assets", "crear activo", json=asset.to_payload())
        logger.info(f"[{asset.code}] Activo registrado.")
        return self._parse(Asset, data, "crear activo") if isinstance(data, dict) else asset

    def update_asset(self, asset_id: str, asset: Asset) -> Asset:
        data = self._request("PUT", f"/assets/{asset_id}", "actualizar activo", json=asset.to_payload())
        logger.info(f"[{asset_id}] Activo actualizado (estado: {asset.status}).")
        return self._parse(Asset, data, "actualizar activo") if isinstance(data, dict) else asset

    # --- Cartera de heladeros ---

    @staticmethod
    def _seller_payload(seller: Seller, password: Optional[str]) -> dict:
        payload = seller.to_payload()
        # La deuda solo la modifican los pagos y las liquidaciones
        payload.pop("currentDebt", None)
        if password:
            payload["password"] = password
        return payload

    def create_seller(self, seller: Seller, password: Optional[str] = None) -> Seller:
        data = self._request("POST", "/sellers", "crear heladero", json=self._seller_payload(seller, password))
        logger.info(f"[{seller.dni}] Heladero registrado.")
        return self._parse(Seller, data, "crear heladero") if isinstance(data, dict) else seller

    def update_seller(self, seller_id: str, seller: Seller, password: Optional[str] = None) -> Seller:
        data = self._request(
            "PUT", f"/sellers/{seller_id}", "actualizar heladero",
            json=self._seller_payload(seller, password)
        )
        logger.info(f"[{seller_id}] Heladero actualizado.")
        return self._parse(Seller, data, "actualizar heladero") if isinstance(data, dict) else seller
