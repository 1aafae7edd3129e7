# despachos/application/use_cases/asset_registry.py
import logging
from typing import Any, Dict, List, Optional

import config
from despachos.domain.exceptions import AssetNotFound, InvalidAssetData
from despachos.domain.models.asset import Asset, AssetScope, AssetStatus
from despachos.domain.ports.logistics_backend import LogisticsBackend

logger = logging.getLogger(__name__)

SCOPES = {scope.value for scope in AssetScope}
STATUSES = {status.value for status in AssetStatus}


class AssetRegistry:
    """
    Alta y edición de activos (triciclos, congeladoras, mobiliario). Permite
    devolver a "disponible" un activo que regresó dañado o en mantenimiento.
    """

    def __init__(self, backend: LogisticsBackend):
        self.backend = backend

    def list(self, scope: Optional[str] = None) -> List[Asset]:
        return self.backend.list_assets(scope)

    def _validate(self, asset: Asset) -> Asset:
        if not (asset.code or "").strip():
            raise InvalidAssetData("El código del activo es obligatorio.")
        if not (asset.name or "").strip():
            raise InvalidAssetData("El nombre del activo es obligatorio.")
        if asset.scope not in SCOPES:
            raise InvalidAssetData(f"Alcance inválido: {asset.scope!r}")
        if asset.status not in STATUSES:
            raise InvalidAssetData(f"Estado inválido: {asset.status!r}")
        return asset

    def create(self, data: Dict[str, Any]) -> Asset:
        values = {"scope": config.DEFAULT_ASSET_SCOPE, "status": AssetStatus.DISPONIBLE.value}
        values.update({k: v for k, v in data.items() if v is not None})
        asset = self._validate(Asset.model_validate(values))
        return self.backend.create_asset(asset)

    def _find(self, asset_id: str) -> Asset:
        asset = next((a for a in self.backend.list_assets(None) if a.id == asset_id), None)
        if asset is None:
            raise AssetNotFound(asset_id)
        return asset

    def update(self, asset_id: str, changes: Dict[str, Any]) -> Asset:
        """Aplica los cambios sobre el activo actual y lo envía completo."""
        current = self._find(asset_id)
        merged = {**current.model_dump(), **{k: v for k, v in changes.items() if v is not None}}
        asset = self._validate(Asset.model_validate(merged))
        if asset.status != current.status:
            logger.info(f"[{asset_id}] Estado del activo: {current.status} -> {asset.status}")
        return self.backend.update_asset(asset_id, asset)

    def set_status(self, asset_id: str, status: str) -> Asset:
        return self.update(asset_id, {"status": status})
