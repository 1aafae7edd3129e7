# despachos/domain/models/order.py
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BeforeValidator

from .base import DomainModel, EntityId, Money, ZERO, none_as_empty


class OrderStatus(str, Enum):
    PENDIENTE = "pendiente"
    ENTREGADO_PARCIAL = "entregado_parcial"
    ENTREGADO = "entregado"


# Solo estos pedidos admiten nuevos despachos
DISPATCHABLE_STATUSES = {OrderStatus.PENDIENTE.value, OrderStatus.ENTREGADO_PARCIAL.value}

Quantity = Annotated[int, BeforeValidator(lambda v: 0 if v is None else v)]


class OrderOwner(DomainModel):
    id: Optional[EntityId] = None
    name: Optional[str] = None


class OrderItem(DomainModel):
    id: Optional[EntityId] = None
    product_id: Optional[EntityId] = None
    product_name: str = ""
    quantity: Quantity = 0
    quantity_delivered: Quantity = 0
    price: Money = ZERO

    @property
    def key(self) -> Optional[str]:
        """Identifica la línea: el id del ítem, o el producto si el backend no envía id."""
        return self.id or self.product_id

    @property
    def pending(self) -> int:
        """Saldo pendiente de entrega del ítem."""
        return max(0, self.quantity - self.quantity_delivered)


class Order(DomainModel):
    id: Optional[EntityId] = None
    order_number: Optional[str] = None
    status: Optional[str] = None
    total: Money = ZERO
    date: Optional[str] = None
    items: Annotated[List[OrderItem], BeforeValidator(none_as_empty)] = []
    user: Optional[OrderOwner] = None
    user_id: Optional[EntityId] = None

    @property
    def owner_id(self) -> Optional[str]:
        if self.user is not None and self.user.id:
            return self.user.id
        return self.user_id

    @property
    def is_fully_delivered(self) -> bool:
        return self.status == OrderStatus.ENTREGADO.value

    def is_dispatchable_for(self, seller_id: str) -> bool:
        return self.status in DISPATCHABLE_STATUSES and self.owner_id == seller_id
