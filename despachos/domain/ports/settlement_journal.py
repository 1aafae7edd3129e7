# despachos/domain/ports/settlement_journal.py
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional


class SettlementJournal(ABC):
    """
    Bitácora local de cierres enviados al backend. Garantiza que un mismo
    despacho no se envíe a cerrar dos veces.
    """

    @abstractmethod
    def reserve(self, load_id: str, seller_id: Optional[str], payment_amount: Decimal) -> bool:
        """
        Marca el despacho como 'en cierre'. Retorna False si ya estaba
        reservado o cerrado.
        """
        pass

    @abstractmethod
    def confirm(self, load_id: str) -> None:
        """Marca el cierre como aceptado por el backend."""
        pass

    @abstractmethod
    def release(self, load_id: str, error: Optional[str] = None) -> None:
        """Libera la reserva tras un fallo del backend para permitir reintentar."""
        pass

    @abstractmethod
    def is_closed(self, load_id: str) -> bool:
        pass
