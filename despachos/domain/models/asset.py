# despachos/domain/models/asset.py
from enum import Enum
from typing import Optional

from .base import DomainModel, EntityId


class AssetScope(str, Enum):
    CLIENT = "CLIENT"
    COMPANY = "COMPANY"


class AssetStatus(str, Enum):
    DISPONIBLE = "disponible"
    EN_USO = "en_uso"
    MANTENIMIENTO = "mantenimiento"
    BAJA = "baja"


class ReturnCondition(str, Enum):
    """Estado en que regresa un activo al cierre de la liquidación."""
    BUENO = "bueno"
    DANADO = "dañado"
    MANTENIMIENTO = "mantenimiento"


class Asset(DomainModel):
    """Equipo físico prestado al heladero: triciclo, congeladora, batería."""
    id: Optional[EntityId] = None
    code: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    scope: Optional[str] = None
    status: Optional[str] = None
    active: Optional[bool] = None

    @property
    def is_available(self) -> bool:
        return self.status == AssetStatus.DISPONIBLE.value


class AssetMovement(DomainModel):
    """Salida de un activo con un despacho; `status_in` se fija al liquidar."""
    id: Optional[EntityId] = None
    asset: Asset
    check_out_time: Optional[str] = None
    check_in_time: Optional[str] = None
    status_in: Optional[str] = None
