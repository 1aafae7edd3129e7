# despachos/application/use_cases/settle_daily_load.py
import logging
from typing import List, Optional

from despachos.domain.exceptions import LoadAlreadyClosed, LoadNotFound
from despachos.domain.models.base import ZERO
from despachos.domain.models.daily_load import DailyLoad
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.domain.ports.settlement_journal import SettlementJournal
from despachos.domain.services.settlement_draft import SettlementDraft

logger = logging.getLogger(__name__)


class SettlementEngine:
    """
    Orquesta la liquidación diaria: prepara el borrador con la deuda vigente
    del heladero y el estado del pedido vinculado, y envía el cierre una sola
    vez por despacho.
    """

    def __init__(self, backend: LogisticsBackend, journal: SettlementJournal):
        self.backend = backend
        self.journal = journal

    def open_loads(self) -> List[DailyLoad]:
        return [load for load in self.backend.list_daily_loads() if load.is_open]

    def start(self, load_id: str) -> SettlementDraft:
        """Prepara el borrador de liquidación de un despacho abierto."""
        if self.journal.is_closed(load_id):
            raise LoadAlreadyClosed(load_id)

        load = next((l for l in self.open_loads() if l.id == load_id), None)
        if load is None:
            raise LoadNotFound(load_id)

        seller_id = load.resolved_seller_id
        seller = next((s for s in self.backend.list_sellers() if s.id == seller_id), None)
        if seller is None:
            logger.warning(f"[{load_id}] Heladero {seller_id} no encontrado; se asume deuda 0.")
        current_debt = seller.current_debt if seller else ZERO

        order_status: Optional[str] = None
        if load.order_id:
            order = next((o for o in self.backend.list_orders() if o.id == load.order_id), None)
            order_status = order.status if order else None

        logger.info(f"[{load_id}] Liquidación iniciada. Deuda vigente: {current_debt:.2f}, pedido: {order_status}")
        return SettlementDraft(load, current_debt=current_debt, order_status=order_status)

    def close(self, draft: SettlementDraft) -> DailyLoad:
        """
        Valida localmente y envía el cierre. Si la validación falla no se
        llama al backend; si el backend falla, el borrador queda editable
        y la reserva se libera para reintentar.
        """
        load_id = draft.load_id
        draft.begin_closing()

        exceeding = draft.returns_exceeding_dispatch()
        if exceeding:
            logger.warning(f"[{load_id}] Devoluciones mayores a lo despachado en ítems: {', '.join(exceeding)}")

        try:
            reserved = self.journal.reserve(load_id, draft.load.resolved_seller_id, draft.payment_amount)
        except Exception as e:
            logger.error(f"[{load_id}] No se pudo registrar la reserva del cierre: {e}")
            draft.reopen()
            raise
        if not reserved:
            draft.reopen()
            raise LoadAlreadyClosed(load_id)

        request = draft.build_close_request()
        try:
            closed = self.backend.close_daily_load(load_id, request)
        except Exception as e:
            logger.error(f"[{load_id}] Falló el cierre de la liquidación: {e}")
            self.journal.release(load_id, str(e))
            draft.reopen()
            raise

        self.journal.confirm(load_id)
        draft.mark_closed(closed)
        logger.info(
            f"[{load_id}] Día cerrado. Pago: {draft.payment_amount:.2f}, "
            f"nuevo saldo de deuda: {draft.new_debt_balance:.2f}"
        )
        return draft.load
