# despachos/domain/models/daily_load.py
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BeforeValidator

from .asset import AssetMovement
from .base import DomainModel, EntityId, Money, ZERO, none_as_empty
from .order import Quantity


class LoadStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class OrderRef(DomainModel):
    id: EntityId


class SellerRef(DomainModel):
    id: Optional[EntityId] = None
    name: Optional[str] = None


class LoadItem(DomainModel):
    id: Optional[EntityId] = None
    product_id: Optional[EntityId] = None
    product_name: Optional[str] = None
    quantity_out: Quantity = 0
    quantity_in: Optional[int] = None
    quantity_bad: Optional[int] = None
    quantity_sold: Optional[int] = None
    unit_price: Money = ZERO

    @property
    def line_value(self) -> Decimal:
        return self.unit_price * self.quantity_out


class DailyLoad(DomainModel):
    """
    Carga diaria (despacho) de un heladero contra uno de sus pedidos.
    Se crea abierta y solo la liquidación la cierra.
    """
    id: Optional[EntityId] = None
    seller_id: Optional[EntityId] = None
    seller: Optional[SellerRef] = None
    order: Optional[OrderRef] = None
    date: str
    status: LoadStatus = LoadStatus.OPEN
    items: Annotated[List[LoadItem], BeforeValidator(none_as_empty)] = []
    asset_movements: Annotated[List[AssetMovement], BeforeValidator(none_as_empty)] = []
    total_load_value: Optional[Money] = None
    total_return_value: Optional[Money] = None
    total_sales_value: Optional[Money] = None
    payment_amount: Optional[Money] = None

    @property
    def is_open(self) -> bool:
        return self.status == LoadStatus.OPEN

    @property
    def resolved_seller_id(self) -> Optional[str]:
        # El backend puede devolver el vendedor embebido o solo su id
        if self.seller_id:
            return self.seller_id
        if self.seller is not None:
            return self.seller.id
        return None

    @property
    def order_id(self) -> Optional[str]:
        return self.order.id if self.order is not None else None

    def computed_load_value(self) -> Decimal:
        if self.total_load_value is not None:
            return self.total_load_value
        return sum((item.line_value for item in self.items), ZERO)
