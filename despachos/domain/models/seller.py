# despachos/domain/models/seller.py
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, Field

from .base import DomainModel, EntityId, Money, ZERO


class CreditInfo(DomainModel):
    """Línea de crédito de un heladero: límite, deuda y saldo disponible."""
    limit: Money = ZERO
    debt: Money = ZERO
    available: Money = ZERO

    @property
    def is_overdrawn(self) -> bool:
        return self.available < 0

    def would_exceed(self, amount: Decimal) -> bool:
        return amount > self.available


class Seller(DomainModel):
    """
    Heladero (vendedor de campo) con su cartera. La deuda solo cambia en el
    backend, vía amortizaciones o cierres de liquidación.
    """
    id: Optional[EntityId] = None
    name: str = ""
    dni: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    code: Optional[str] = None
    role: Optional[str] = None
    active: Optional[bool] = None
    credit_limit: Money = ZERO
    current_debt: Money = Field(
        default=ZERO,
        validation_alias=AliasChoices("currentDebt", "debt", "current_debt"),
        serialization_alias="currentDebt",
    )

    @property
    def available_credit(self) -> Decimal:
        return self.credit_limit - self.current_debt

    def credit_info(self) -> CreditInfo:
        return CreditInfo(
            limit=self.credit_limit,
            debt=self.current_debt,
            available=self.available_credit,
        )
