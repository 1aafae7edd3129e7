# despachos/application/use_cases/seller_loads.py
from typing import List, Optional, Tuple

from despachos.domain.models.daily_load import DailyLoad
from despachos.domain.ports.logistics_backend import LogisticsBackend


class SellerLoadsQuery:
    """Historial de cargas de un heladero ("Mi carga"), más recientes primero."""

    def __init__(self, backend: LogisticsBackend):
        self.backend = backend

    def all_loads(self, seller_id: str) -> List[DailyLoad]:
        loads = [l for l in self.backend.list_daily_loads() if l.resolved_seller_id == seller_id]
        loads.sort(key=lambda l: l.date, reverse=True)
        return loads

    def execute(self, seller_id: str, on_date: Optional[str] = None) -> Tuple[List[DailyLoad], List[str]]:
        """
        Retorna las cargas del día pedido (todas si no hay fecha) y las
        fechas con actividad, para sugerirlas cuando el día está vacío.
        """
        loads = self.all_loads(seller_id)
        activity_dates = sorted({l.date for l in loads}, reverse=True)
        if on_date:
            loads = [l for l in loads if l.date == on_date]
        return loads, activity_dates
