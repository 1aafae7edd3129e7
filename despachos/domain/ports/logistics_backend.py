# despachos/domain/ports/logistics_backend.py
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from despachos.domain.models.asset import Asset
from despachos.domain.models.daily_load import DailyLoad
from despachos.domain.models.order import Order
from despachos.domain.models.seller import Seller


class LogisticsBackend(ABC):
    """
    Puerto hacia el backend de logística, que es la fuente de verdad de
    deudas, saldos de pedidos y estado de activos.
    """

    @abstractmethod
    def list_sellers(self) -> List[Seller]:
        pass

    @abstractmethod
    def list_orders(self) -> List[Order]:
        pass

    @abstractmethod
    def list_assets(self, scope: Optional[str] = None) -> List[Asset]:
        pass

    @abstractmethod
    def list_daily_loads(self) -> List[DailyLoad]:
        pass

    @abstractmethod
    def create_daily_load(self, load: DailyLoad) -> DailyLoad:
        """
        Registra un despacho abierto. El backend asigna el id y descuenta los
        saldos pendientes del pedido.
        """
        pass

    @abstractmethod
    def close_daily_load(self, load_id: str, load: DailyLoad) -> DailyLoad:
        """
        Cierra la liquidación. El backend descuenta la deuda del heladero por
        el monto pagado y actualiza el estado de cada activo devuelto.
        """
        pass

    @abstractmethod
    def register_payment(self, seller_id: str, amount: Decimal, note: Optional[str] = None) -> None:
        """Amortización de deuda fuera de una liquidación."""
        pass

    @abstractmethod
    def create_asset(self, asset: Asset) -> Asset:
        pass

    @abstractmethod
    def update_asset(self, asset_id: str, asset: Asset) -> Asset:
        """Reemplaza los datos del activo, incluido su estado."""
        pass

    @abstractmethod
    def create_seller(self, seller: Seller, password: Optional[str] = None) -> Seller:
        pass

    @abstractmethod
    def update_seller(self, seller_id: str, seller: Seller, password: Optional[str] = None) -> Seller:
        """Actualiza datos y línea de crédito. La deuda no se envía."""
        pass
