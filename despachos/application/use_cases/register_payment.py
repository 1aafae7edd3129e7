# despachos/application/use_cases/register_payment.py
import logging
from decimal import Decimal
from typing import Any, Optional

from despachos.domain.exceptions import InvalidAmount
from despachos.domain.models.base import to_money
from despachos.domain.ports.logistics_backend import LogisticsBackend

logger = logging.getLogger(__name__)


class RegisterPaymentUseCase:
    """Amortización: abono a la deuda de un heladero fuera de la liquidación."""

    def __init__(self, backend: LogisticsBackend):
        self.backend = backend

    def execute(self, seller_id: str, amount: Any, note: Optional[str] = None) -> Decimal:
        try:
            value = to_money(amount)
        except ValueError as e:
            raise InvalidAmount(amount) from e
        if value <= 0:
            raise InvalidAmount(amount)

        logger.info(f"[{seller_id}] Registrando amortización de {value:.2f}")
        self.backend.register_payment(seller_id, value, note)
        return value
