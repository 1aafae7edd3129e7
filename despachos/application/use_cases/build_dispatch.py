# despachos/application/use_cases/build_dispatch.py
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, List, Optional

import config
from despachos.domain.exceptions import (
    AssetNotAvailable,
    BackendError,
    NoItemsSelected,
    OrderNotEligible,
    SellerNotFound,
    SellerNotSelected,
)
from despachos.domain.models.asset import Asset, AssetMovement
from despachos.domain.models.base import ZERO
from despachos.domain.models.daily_load import DailyLoad, LoadStatus, OrderRef
from despachos.domain.models.order import Order
from despachos.domain.models.seller import CreditInfo, Seller
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.domain.services.balance_tracker import DispatchLine

logger = logging.getLogger(__name__)


class DispatchBuilder:
    """
    Arma un despacho (carga diaria) para un heladero contra uno de sus
    pedidos pendientes: cantidades por ítem acotadas al saldo pendiente y
    activos disponibles que salen con la carga.
    """

    def __init__(
        self,
        backend: LogisticsBackend,
        asset_scope: Optional[str] = None,
        today: Callable[[], date] = date.today
    ):
        self.backend = backend
        self.asset_scope = asset_scope or config.DEFAULT_ASSET_SCOPE
        self._today = today

        self.sellers: List[Seller] = []
        self.available_assets: List[Asset] = []

        self.seller: Optional[Seller] = None
        self.pending: List[Order] = []
        self.order: Optional[Order] = None
        self.lines: List[DispatchLine] = []
        self.selected_asset_ids: List[str] = []

    # --- Carga de catálogos ---

    def load_sellers(self) -> List[Seller]:
        self.sellers = self.backend.list_sellers()
        return self.sellers

    def load_available_assets(self) -> List[Asset]:
        assets = self.backend.list_assets(self.asset_scope)
        self.available_assets = [a for a in assets if a.is_available]
        return self.available_assets

    # --- Heladero y pedido ---

    def select_seller(self, seller_id: str) -> Seller:
        if not self.sellers:
            self.load_sellers()
        seller = next((s for s in self.sellers if s.id == seller_id), None)
        if seller is None:
            raise SellerNotFound(seller_id)

        self.seller = seller
        self.order = None
        self.lines = []
        self.selected_asset_ids = []
        self.pending_orders(refresh=True)
        return seller

    @property
    def credit_info(self) -> Optional[CreditInfo]:
        return self.seller.credit_info() if self.seller else None

    def pending_orders(self, refresh: bool = False) -> List[Order]:
        """Pedidos del heladero en estado pendiente o entregado parcial."""
        if self.seller is None:
            raise SellerNotSelected()
        if refresh:
            orders = self.backend.list_orders()
            self.pending = [o for o in orders if o.is_dispatchable_for(self.seller.id)]
        return self.pending

    def select_order(self, order_id: str) -> Order:
        if self.seller is None:
            raise SellerNotSelected()
        order = next((o for o in self.pending if o.id == order_id), None)
        if order is None:
            raise OrderNotEligible(order_id)
        self.order = order
        self.lines = [DispatchLine(item) for item in order.items]
        return order

    # --- Cantidades ---

    def set_quantity(self, index: int, value: Any) -> int:
        return self.lines[index].set_quantity(value)

    def line_for(self, key: str) -> Optional[DispatchLine]:
        """Línea por id de ítem del pedido; un producto puede repetirse en varias líneas."""
        return next((line for line in self.lines if line.key == key), None)

    @property
    def load_value(self) -> Decimal:
        return sum((line.line_value for line in self.lines), ZERO)

    @property
    def exceeds_credit(self) -> bool:
        """Aviso: la carga supera el crédito disponible. No bloquea el despacho."""
        info = self.credit_info
        return info is not None and info.would_exceed(self.load_value)

    # --- Activos ---

    def add_asset(self, asset_id: str) -> bool:
        if not asset_id or asset_id in self.selected_asset_ids:
            return False
        if not any(a.id == asset_id for a in self.available_assets):
            raise AssetNotAvailable(asset_id)
        self.selected_asset_ids.append(asset_id)
        return True

    def remove_asset(self, asset_id: str) -> None:
        self.selected_asset_ids = [a for a in self.selected_asset_ids if a != asset_id]

    # --- Envío ---

    def build_request(self) -> DailyLoad:
        if self.seller is None:
            raise SellerNotSelected()
        if self.order is None:
            raise OrderNotEligible("")

        items = [line.to_load_item() for line in self.lines if line.quantity_out > 0]
        if not items:
            raise NoItemsSelected()

        movements = [AssetMovement(asset=Asset(id=asset_id)) for asset_id in self.selected_asset_ids]
        return DailyLoad(
            seller_id=self.seller.id,
            date=self._today().isoformat(),
            status=LoadStatus.OPEN,
            order=OrderRef(id=self.order.id),
            items=items,
            asset_movements=movements,
        )

    def reset(self) -> None:
        self.seller = None
        self.pending = []
        self.order = None
        self.lines = []
        self.selected_asset_ids = []

    def submit(self) -> DailyLoad:
        request = self.build_request()
        if self.exceeds_credit:
            logger.warning(
                f"[{request.seller_id}] La carga ({self.load_value:.2f}) supera el crédito "
                f"disponible ({self.credit_info.available:.2f})."
            )

        created = self.backend.create_daily_load(request)
        self.reset()

        # La disponibilidad de activos se vuelve a consultar, no se asume
        try:
            self.load_available_assets()
        except BackendError as e:
            logger.error(f"[{created.id}] Despacho creado, pero no se pudo refrescar los activos: {e}")
        return created
