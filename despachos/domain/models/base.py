# despachos/domain/models/base.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any, Dict

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """
    Normaliza un monto a Decimal con dos decimales (céntimos).
    Vacío o None equivale a cero. Lanza ValueError si no es un número finito.
    """
    if value is None:
        return ZERO
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Monto inválido: {value!r}")
    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        if not amount.is_finite():
            raise ValueError(f"Monto inválido: {value!r}")
        # Montos fuera de la precisión decimal también son inválidos
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Monto inválido: {value!r}") from e


def _to_id(value: Any) -> Any:
    # El backend devuelve ids numéricos o UUID según la entidad
    if value is None or isinstance(value, str):
        return value
    return str(value)


Money = Annotated[
    Decimal,
    BeforeValidator(to_money),
    PlainSerializer(float, return_type=float, when_used="json"),
]

EntityId = Annotated[str, BeforeValidator(_to_id)]


def none_as_empty(value: Any) -> Any:
    # Listas opcionales del backend: null equivale a lista vacía
    return [] if value is None else value


class DomainModel(BaseModel):
    """
    Base de los modelos de dominio. El backend habla camelCase, el código
    usa snake_case; los campos desconocidos se conservan para reenviarlos.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra='allow'
    )

    def to_payload(self) -> Dict[str, Any]:
        """Representación JSON (camelCase) lista para enviar al backend."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
