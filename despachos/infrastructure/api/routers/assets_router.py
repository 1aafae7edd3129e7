# despachos/infrastructure/api/routers/assets_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from despachos.application.use_cases.asset_registry import AssetRegistry
from despachos.domain.exceptions import DespachoError
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.infrastructure.api.dependencies import get_backend, to_http_exception
from despachos.infrastructure.api.schemas import AssetRequest, AssetStatusRequest

router = APIRouter(prefix="/api/v1/activos", tags=["Activos"])


@router.get("", summary="Activos registrados")
def list_assets(
    scope: Optional[str] = Query(None, description="CLIENT | COMPANY"),
    backend: LogisticsBackend = Depends(get_backend)
):
    try:
        assets = AssetRegistry(backend).list(scope)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return [a.to_payload() for a in assets]


@router.post("", status_code=201, summary="Registrar un activo")
def create_asset(request: AssetRequest, backend: LogisticsBackend = Depends(get_backend)):
    try:
        asset = AssetRegistry(backend).create(request.model_dump())
    except DespachoError as e:
        raise to_http_exception(e) from e
    return asset.to_payload()


@router.put("/{asset_id}", summary="Editar un activo")
def update_asset(asset_id: str, request: AssetRequest, backend: LogisticsBackend = Depends(get_backend)):
    try:
        asset = AssetRegistry(backend).update(asset_id, request.model_dump(exclude_unset=True))
    except DespachoError as e:
        raise to_http_exception(e) from e
    return asset.to_payload()


@router.patch("/{asset_id}/estado", summary="Cambiar el estado de un activo")
def set_asset_status(asset_id: str, request: AssetStatusRequest, backend: LogisticsBackend = Depends(get_backend)):
    """Por ejemplo, devolver a 'disponible' un activo que salió de mantenimiento."""
    try:
        asset = AssetRegistry(backend).set_status(asset_id, request.status)
    except DespachoError as e:
        raise to_http_exception(e) from e
    return asset.to_payload()
