# despachos/infrastructure/api/routers/sellers_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from despachos.application.use_cases.register_payment import RegisterPaymentUseCase
from despachos.application.use_cases.seller_ledger import SellerLedger
from despachos.application.use_cases.seller_loads import SellerLoadsQuery
from despachos.domain.exceptions import DespachoError
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.infrastructure.api.dependencies import get_backend, to_http_exception
from despachos.infrastructure.api.schemas import PaymentRequest, SellerRequest

router = APIRouter(prefix="/api/v1/vendedores", tags=["Heladeros"])


@router.post("", status_code=201, summary="Registrar un heladero")
def create_seller(request: SellerRequest, backend: LogisticsBackend = Depends(get_backend)):
    data = request.model_dump(exclude={"password"})
    try:
        seller = SellerLedger(backend).create(data, request.password)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return {**seller.to_payload(), "creditInfo": seller.credit_info().to_payload()}


@router.put("/{seller_id}", summary="Editar un heladero y su línea de crédito")
def update_seller(seller_id: str, request: SellerRequest, backend: LogisticsBackend = Depends(get_backend)):
    changes = request.model_dump(exclude_unset=True, exclude={"password"})
    try:
        seller = SellerLedger(backend).update(seller_id, changes, request.password)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return {**seller.to_payload(), "creditInfo": seller.credit_info().to_payload()}


@router.post("/{seller_id}/pagos", summary="Registrar amortización de deuda")
def register_payment(seller_id: str, request: PaymentRequest, backend: LogisticsBackend = Depends(get_backend)):
    try:
        amount = RegisterPaymentUseCase(backend).execute(seller_id, request.amount, request.note)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return {"status": "registered", "sellerId": seller_id, "amount": float(amount)}


@router.get("/{seller_id}/cargas", summary="Cargas de un heladero")
def list_seller_loads(
    seller_id: str,
    fecha: Optional[str] = Query(None, description="Fecha YYYY-MM-DD"),
    backend: LogisticsBackend = Depends(get_backend)
):
    try:
        loads, activity_dates = SellerLoadsQuery(backend).execute(seller_id, fecha)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return {"loads": [l.to_payload() for l in loads], "activityDates": activity_dates}
