# despachos/domain/services/settlement_draft.py
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from despachos.domain.exceptions import (
    InvalidAmount,
    InvalidAssetCondition,
    LoadAlreadyClosed,
    OverpaymentError,
    UnderpaymentOnFinalDelivery,
    UnknownLoadItem,
)
from despachos.domain.models.asset import AssetMovement, ReturnCondition
from despachos.domain.models.base import ZERO, to_money
from despachos.domain.models.daily_load import DailyLoad, LoadItem, LoadStatus
from despachos.domain.models.order import OrderStatus
from despachos.domain.services.balance_tracker import parse_quantity

RETURN_CONDITIONS = {condition.value for condition in ReturnCondition}


class DraftState(str, Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class ItemReturn:
    good: int = 0
    bad: int = 0


class SettlementDraft:
    """
    Liquidación en curso de un despacho abierto: devoluciones por ítem,
    estado de los activos devueltos y pago recibido.

    Todas las reglas se evalúan en memoria; el borrador no habla con el
    backend. Los montos se manejan en céntimos exactos (Decimal a dos
    decimales), por lo que "deuda cancelada" significa saldo exactamente 0.
    """

    def __init__(self, load: DailyLoad, current_debt: Any = ZERO, order_status: Optional[str] = None):
        if not load.is_open:
            raise LoadAlreadyClosed(load.id)
        self.load = load
        self.current_debt = to_money(current_debt)
        self.order_status = order_status
        self.state = DraftState.OPEN
        self.payment_amount = ZERO
        self.returns: Dict[str, ItemReturn] = {
            item.id: ItemReturn() for item in load.items if item.id
        }
        self.asset_conditions: Dict[str, str] = {
            movement.id: ReturnCondition.BUENO.value
            for movement in load.asset_movements if movement.id
        }

    @property
    def load_id(self) -> Optional[str]:
        return self.load.id

    def _ensure_editable(self):
        if self.state != DraftState.OPEN:
            raise LoadAlreadyClosed(self.load_id)

    # --- Captura de datos ---

    def set_return(self, item_id: str, good: Any = None, bad: Any = None) -> ItemReturn:
        """Registra la devolución de un ítem. None deja el valor actual."""
        self._ensure_editable()
        if item_id not in self.returns:
            raise UnknownLoadItem(item_id)
        current = self.returns[item_id]
        new_good = current.good if good is None else parse_quantity(good)
        new_bad = current.bad if bad is None else parse_quantity(bad)
        self.returns[item_id] = ItemReturn(good=new_good, bad=new_bad)
        return self.returns[item_id]

    def set_asset_condition(self, movement_id: str, condition: str) -> None:
        self._ensure_editable()
        if movement_id not in self.asset_conditions:
            raise InvalidAssetCondition(movement_id)
        value = condition.value if isinstance(condition, ReturnCondition) else condition
        if value not in RETURN_CONDITIONS:
            raise InvalidAssetCondition(movement_id, condition)
        self.asset_conditions[movement_id] = value

    def set_payment(self, value: Any) -> Decimal:
        self._ensure_editable()
        try:
            amount = to_money(value)
        except ValueError as e:
            raise InvalidAmount(value) from e
        if amount < 0:
            raise InvalidAmount(value)
        self.payment_amount = amount
        return amount

    # --- Reglas ---

    @property
    def total_load_value(self) -> Decimal:
        return self.load.computed_load_value()

    @property
    def is_overpaying(self) -> bool:
        return self.payment_amount > self.current_debt

    @property
    def is_order_fully_delivered(self) -> bool:
        return self.order_status == OrderStatus.ENTREGADO.value

    @property
    def is_underpaying_final(self) -> bool:
        return self.is_order_fully_delivered and (self.current_debt - self.payment_amount) > 0

    @property
    def new_debt_balance(self) -> Decimal:
        return max(ZERO, self.current_debt - self.payment_amount)

    @property
    def can_close(self) -> bool:
        return self.state == DraftState.OPEN and not (self.is_overpaying or self.is_underpaying_final)

    def returns_exceeding_dispatch(self) -> List[str]:
        """
        Ítems cuya devolución (buena + mala) supera lo despachado.
        No bloquea el cierre; solo se reporta.
        """
        exceeding = []
        for item in self.load.items:
            returned = self.returns.get(item.id) if item.id else None
            if returned is not None and returned.good + returned.bad > item.quantity_out:
                exceeding.append(item.id)
        return exceeding

    def validate(self) -> None:
        if self.is_overpaying:
            raise OverpaymentError(self.payment_amount, self.current_debt)
        if self.is_underpaying_final:
            raise UnderpaymentOnFinalDelivery(self.payment_amount, self.current_debt)

    # --- Solicitud de cierre ---

    def _updated_item(self, item: LoadItem) -> LoadItem:
        if not item.id or item.id not in self.returns:
            return item
        returned = self.returns[item.id]
        return item.model_copy(update={"quantity_in": returned.good, "quantity_bad": returned.bad})

    def _updated_movement(self, movement: AssetMovement) -> AssetMovement:
        status_in = self.asset_conditions.get(movement.id, ReturnCondition.BUENO.value) if movement.id else ReturnCondition.BUENO.value
        return AssetMovement(id=movement.id, asset=movement.asset, status_in=status_in)

    def build_close_request(self) -> DailyLoad:
        return self.load.model_copy(update={
            "items": [self._updated_item(item) for item in self.load.items],
            "asset_movements": [self._updated_movement(m) for m in self.load.asset_movements],
            "payment_amount": self.payment_amount,
        })

    # --- Transiciones ---

    def begin_closing(self) -> None:
        self._ensure_editable()
        self.validate()
        self.state = DraftState.CLOSING

    def mark_closed(self, closed_load: Optional[DailyLoad] = None) -> None:
        self.state = DraftState.CLOSED
        self.load = (closed_load or self.load).model_copy(update={"status": LoadStatus.CLOSED})

    def reopen(self) -> None:
        if self.state == DraftState.CLOSING:
            self.state = DraftState.OPEN
