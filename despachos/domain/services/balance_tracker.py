# despachos/domain/services/balance_tracker.py
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from despachos.domain.exceptions import ExceedsAvailable, InvalidQuantity
from despachos.domain.models.daily_load import LoadItem
from despachos.domain.models.order import OrderItem


def parse_quantity(value: Any) -> int:
    """
    Convierte la entrada de un campo de cantidad en un entero >= 0.
    Un campo vacío es un cero explícito, no un error.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidQuantity(value)
    if isinstance(value, int):
        qty = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidQuantity(value)
        qty = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        try:
            number = Decimal(text)
        except InvalidOperation as e:
            raise InvalidQuantity(value) from e
        # "5" y "5.0" valen lo mismo; "2.5" no es una cantidad
        if not number.is_finite() or number != number.to_integral_value():
            raise InvalidQuantity(value)
        qty = int(number)
    else:
        raise InvalidQuantity(value)

    if qty < 0:
        raise InvalidQuantity(value)
    return qty


class DispatchLine:
    """
    Ítem de un pedido dentro de un despacho en preparación. Guarda la
    cantidad a despachar y la acota al saldo pendiente del ítem.
    """

    def __init__(self, item: OrderItem):
        self.item = item
        self.quantity_out = 0

    @property
    def key(self) -> Optional[str]:
        return self.item.key

    @property
    def product_id(self) -> Optional[str]:
        return self.item.product_id

    @property
    def product_name(self) -> str:
        return self.item.product_name

    @property
    def quantity_total(self) -> int:
        return self.item.quantity

    @property
    def quantity_delivered(self) -> int:
        return self.item.quantity_delivered

    @property
    def pending(self) -> int:
        return self.item.pending

    @property
    def unit_price(self) -> Decimal:
        return self.item.price

    @property
    def line_value(self) -> Decimal:
        return self.unit_price * self.quantity_out

    def set_quantity(self, value: Any) -> int:
        qty = parse_quantity(value)
        if qty > self.pending:
            raise ExceedsAvailable(requested=qty, max_available=self.pending)
        self.quantity_out = qty
        return qty

    def to_load_item(self) -> LoadItem:
        return LoadItem(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity_out=self.quantity_out,
            unit_price=self.unit_price,
        )
