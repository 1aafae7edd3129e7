# despachos/infrastructure/api/routers/settlement_router.py
from fastapi import APIRouter, Depends

from despachos.application.use_cases.settle_daily_load import SettlementEngine
from despachos.domain.exceptions import DespachoError
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.domain.ports.settlement_journal import SettlementJournal
from despachos.domain.services.settlement_draft import SettlementDraft
from despachos.infrastructure.api.dependencies import get_backend, get_journal, to_http_exception
from despachos.infrastructure.api.schemas import SettlementRequest

router = APIRouter(prefix="/api/v1/liquidaciones", tags=["Liquidaciones"])


def _summary(draft: SettlementDraft) -> dict:
    return {
        "load": draft.load.to_payload(),
        "lines": [
            {"itemId": item.id, "productName": item.product_name,
             "quantityOut": item.quantity_out, "lineValue": float(item.line_value)}
            for item in draft.load.items
        ],
        "totalLoadValue": float(draft.total_load_value),
        "currentDebt": float(draft.current_debt),
        "isOrderFullyDelivered": draft.is_order_fully_delivered,
    }


@router.get("/abiertas", summary="Despachos abiertos pendientes de liquidar")
def list_open_loads(
    backend: LogisticsBackend = Depends(get_backend),
    journal: SettlementJournal = Depends(get_journal)
):
    try:
        loads = SettlementEngine(backend, journal).open_loads()
    except DespachoError as e:
        raise to_http_exception(e) from e
    return [l.to_payload() for l in loads]


@router.get("/{load_id}", summary="Resumen de un despacho a liquidar")
def preview_settlement(
    load_id: str,
    backend: LogisticsBackend = Depends(get_backend),
    journal: SettlementJournal = Depends(get_journal)
):
    try:
        draft = SettlementEngine(backend, journal).start(load_id)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return _summary(draft)


@router.post("/{load_id}/cierre", summary="Cerrar el día de un heladero")
def close_settlement(
    load_id: str,
    request: SettlementRequest,
    backend: LogisticsBackend = Depends(get_backend),
    journal: SettlementJournal = Depends(get_journal)
):
    engine = SettlementEngine(backend, journal)
    try:
        draft = engine.start(load_id)
        for item_id, returned in request.returns.items():
            draft.set_return(item_id, good=returned.good, bad=returned.bad)
        for movement_id, condition in request.asset_conditions.items():
            draft.set_asset_condition(movement_id, condition)
        draft.set_payment(request.payment_amount)
        closed = engine.close(draft)
    except DespachoError as e:
        raise to_http_exception(e) from e

    return {
        "status": "closed",
        "load": closed.to_payload(),
        "paymentAmount": float(draft.payment_amount),
        "newDebtBalance": float(draft.new_debt_balance),
        "returnsExceedingDispatch": draft.returns_exceeding_dispatch(),
    }
