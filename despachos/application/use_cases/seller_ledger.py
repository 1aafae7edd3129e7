# despachos/application/use_cases/seller_ledger.py
import logging
from typing import Any, Dict, Optional

from despachos.domain.exceptions import InvalidSellerData, SellerNotFound
from despachos.domain.models.base import to_money
from despachos.domain.models.seller import Seller
from despachos.domain.ports.logistics_backend import LogisticsBackend

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
DEFAULT_ROLE = "cliente"


class SellerLedger:
    """Alta y edición de heladeros con su línea de crédito."""

    def __init__(self, backend: LogisticsBackend):
        self.backend = backend

    @staticmethod
    def _check_credit_limit(value: Any):
        try:
            limit = to_money(value)
        except ValueError as e:
            raise InvalidSellerData(f"Límite de crédito inválido: {value!r}") from e
        if limit < 0:
            raise InvalidSellerData(f"Límite de crédito inválido: {value!r}")

    @staticmethod
    def _check_password(password: Optional[str]):
        if password is not None and len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidSellerData(f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.")

    @staticmethod
    def _check_required(seller: Seller):
        for field, label in (("name", "Nombre"), ("email", "Email"), ("dni", "DNI")):
            if not (getattr(seller, field) or "").strip():
                raise InvalidSellerData(f"{label} requerido")

    def create(self, data: Dict[str, Any], password: Optional[str]) -> Seller:
        if not password:
            raise InvalidSellerData(f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.")
        self._check_password(password)
        values = {"role": DEFAULT_ROLE, **{k: v for k, v in data.items() if v is not None}}
        if "credit_limit" in values:
            self._check_credit_limit(values["credit_limit"])
        seller = Seller.model_validate(values)
        self._check_required(seller)
        return self.backend.create_seller(seller, password)

    def update(self, seller_id: str, changes: Dict[str, Any], password: Optional[str] = None) -> Seller:
        current = next((s for s in self.backend.list_sellers() if s.id == seller_id), None)
        if current is None:
            raise SellerNotFound(seller_id)
        # Contraseña vacía al editar: se conserva la actual
        password = password or None
        self._check_password(password)

        updates = {k: v for k, v in changes.items() if v is not None}
        if "credit_limit" in updates:
            self._check_credit_limit(updates["credit_limit"])
        seller = Seller.model_validate({**current.model_dump(), **updates})
        self._check_required(seller)
        if seller.credit_limit != current.credit_limit:
            logger.info(f"[{seller_id}] Límite de crédito: {current.credit_limit:.2f} -> {seller.credit_limit:.2f}")
        return self.backend.update_seller(seller_id, seller, password)
