# despachos/domain/exceptions.py
from decimal import Decimal
from typing import Optional


class DespachoError(Exception):
    """Raíz de los errores del dominio de despachos y liquidaciones."""


# --- Errores de validación: se resuelven localmente, nunca llegan al backend ---

class ValidationError(DespachoError):
    pass


class InvalidQuantity(ValidationError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Cantidad inválida: {value!r}")


class ExceedsAvailable(ValidationError):
    """La cantidad solicitada supera el saldo pendiente del ítem."""
    def __init__(self, requested: int, max_available: int):
        self.requested = requested
        self.max_available = max_available
        super().__init__(f"Máximo disponible: {max_available} (solicitado: {requested})")


class InvalidAmount(ValidationError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Monto inválido: {value!r}")


class SellerNotSelected(ValidationError):
    def __init__(self):
        super().__init__("Selecciona un heladero antes de consultar sus pedidos.")


class SellerNotFound(ValidationError):
    def __init__(self, seller_id: str):
        self.seller_id = seller_id
        super().__init__(f"Heladero no encontrado: {seller_id}")


class OrderNotEligible(ValidationError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"El pedido {order_id} no está pendiente para este heladero.")


class NoItemsSelected(ValidationError):
    def __init__(self):
        super().__init__("Ingresa cantidades a despachar.")


class AssetNotAvailable(ValidationError):
    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"El activo {asset_id} no está disponible.")


class AssetNotFound(ValidationError):
    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Activo no encontrado: {asset_id}")


class InvalidAssetData(ValidationError):
    """Datos de alta o edición de un activo incompletos o fuera de catálogo."""


class InvalidSellerData(ValidationError):
    """Datos de alta o edición de un heladero incompletos."""


class LoadNotFound(ValidationError):
    def __init__(self, load_id: str):
        self.load_id = load_id
        super().__init__(f"No hay un despacho abierto con id {load_id}.")


class UnknownLoadItem(ValidationError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"El ítem {item_id} no pertenece al despacho.")


class InvalidAssetCondition(ValidationError):
    def __init__(self, movement_id: str, condition: Optional[str] = None):
        self.movement_id = movement_id
        self.condition = condition
        if condition is None:
            message = f"El movimiento de activo {movement_id} no pertenece al despacho."
        else:
            message = f"Estado de retorno inválido para {movement_id}: {condition!r}"
        super().__init__(message)


class OverpaymentError(ValidationError):
    def __init__(self, payment: Decimal, current_debt: Decimal):
        self.payment = payment
        self.current_debt = current_debt
        super().__init__(f"El pago excede la deuda total ({current_debt:.2f}).")


class UnderpaymentOnFinalDelivery(ValidationError):
    """El despacho completó el pedido: la deuda debe cancelarse por completo."""
    def __init__(self, payment: Decimal, current_debt: Decimal):
        self.payment = payment
        self.current_debt = current_debt
        super().__init__(f"Debe cancelar el saldo restante ({current_debt:.2f}).")


class LoadAlreadyClosed(DespachoError):
    def __init__(self, load_id: Optional[str]):
        self.load_id = load_id
        super().__init__(f"El despacho {load_id} ya fue liquidado o se está liquidando.")


# --- Errores del backend: se notifican y el usuario reintenta manualmente ---

class BackendError(DespachoError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SessionExpired(BackendError):
    def __init__(self):
        super().__init__("La sesión expiró. Vuelve a iniciar sesión.", status_code=401)
