# despachos/infrastructure/api/schemas.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DispatchRequest(BaseModel):
    """Despacho a registrar: cantidades por producto y activos que salen."""
    seller_id: str = Field(..., min_length=1, description="ID del heladero")
    order_id: str = Field(..., min_length=1, description="ID del pedido pendiente")
    quantities: Dict[str, Any] = Field(default_factory=dict, description="id del ítem del pedido -> cantidad a despachar")
    asset_ids: List[str] = Field(default_factory=list, description="Activos disponibles que salen con la carga")


class ItemReturnRequest(BaseModel):
    good: Any = 0
    bad: Any = 0


class SettlementRequest(BaseModel):
    returns: Dict[str, ItemReturnRequest] = Field(default_factory=dict, description="itemId -> devolución")
    asset_conditions: Dict[str, str] = Field(default_factory=dict, description="movementId -> bueno|dañado|mantenimiento")
    payment_amount: Any = Field(default=0, description="Monto recibido (amortización)")


class PaymentRequest(BaseModel):
    amount: Any
    note: Optional[str] = Field(None, max_length=300)


class AssetRequest(BaseModel):
    """Alta o edición de un activo. En edición solo se envían los campos a cambiar."""
    code: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=120)
    type: Optional[str] = Field(None, description="triciclo, congeladora, mueble...")
    scope: Optional[str] = Field(None, description="CLIENT | COMPANY")
    status: Optional[str] = Field(None, description="disponible | en_uso | mantenimiento | baja")


class AssetStatusRequest(BaseModel):
    status: str


class SellerRequest(BaseModel):
    name: Optional[str] = None
    dni: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    credit_limit: Any = None
    role: Optional[str] = None
    password: Optional[str] = Field(None, description="Obligatoria al crear (mín. 6 caracteres)")
