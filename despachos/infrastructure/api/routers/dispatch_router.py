# despachos/infrastructure/api/routers/dispatch_router.py
from fastapi import APIRouter, Depends, HTTPException

from despachos.application.use_cases.build_dispatch import DispatchBuilder
from despachos.domain.exceptions import DespachoError
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.infrastructure.api.dependencies import get_backend, to_http_exception
from despachos.infrastructure.api.schemas import DispatchRequest

router = APIRouter(prefix="/api/v1/despachos", tags=["Despachos"])


@router.get("/vendedores", summary="Heladeros con su línea de crédito")
def list_sellers(backend: LogisticsBackend = Depends(get_backend)):
    try:
        sellers = DispatchBuilder(backend).load_sellers()
    except DespachoError as e:
        raise to_http_exception(e) from e
    return [{**s.to_payload(), "creditInfo": s.credit_info().to_payload()} for s in sellers]


@router.get("/vendedores/{seller_id}/pedidos", summary="Pedidos pendientes de un heladero")
def list_pending_orders(seller_id: str, backend: LogisticsBackend = Depends(get_backend)):
    builder = DispatchBuilder(backend)
    try:
        builder.select_seller(seller_id)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return [
        {**o.to_payload(), "pendingByItem": {item.key: item.pending for item in o.items if item.key}}
        for o in builder.pending
    ]


@router.get("/activos", summary="Activos disponibles para despachar")
def list_available_assets(backend: LogisticsBackend = Depends(get_backend)):
    try:
        assets = DispatchBuilder(backend).load_available_assets()
    except DespachoError as e:
        raise to_http_exception(e) from e
    return [a.to_payload() for a in assets]


@router.post("", status_code=201, summary="Registrar un despacho (carga diaria)")
def create_dispatch(request: DispatchRequest, backend: LogisticsBackend = Depends(get_backend)):
    """
    Valida cantidades contra el saldo pendiente de cada ítem y los activos
    contra la disponibilidad actual. Solo si todo es válido se envía la
    carga al backend en una única llamada.
    """
    builder = DispatchBuilder(backend)
    try:
        builder.select_seller(request.seller_id)
        builder.select_order(request.order_id)

        for item_key, quantity in request.quantities.items():
            line = builder.line_for(item_key)
            if line is None:
                raise HTTPException(status_code=422, detail=f"El ítem {item_key} no pertenece al pedido.")
            line.set_quantity(quantity)

        if request.asset_ids:
            builder.load_available_assets()
            for asset_id in request.asset_ids:
                builder.add_asset(asset_id)

        credit_warning = builder.exceeds_credit
        created = builder.submit()
    except DespachoError as e:
        raise to_http_exception(e) from e

    return {"status": "created", "creditWarning": credit_warning, "load": created.to_payload()}
