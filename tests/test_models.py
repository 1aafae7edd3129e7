from decimal import Decimal

import pytest
from pydantic import ValidationError

from despachos.domain.models.base import to_money
from despachos.domain.models.daily_load import DailyLoad
from despachos.domain.models.order import Order
from despachos.domain.models.seller import Seller


def test_money_is_quantized_to_cents():
    assert to_money(100.005) == Decimal("100.01")
    assert to_money("49.994") == Decimal("49.99")
    assert to_money("") == Decimal("0.00")
    assert to_money(None) == Decimal("0.00")


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True, "1e30", [1]])
def test_money_rejects_non_numbers(value):
    with pytest.raises(ValueError):
        to_money(value)


def test_seller_accepts_debt_alias_and_computes_available_credit():
    seller = Seller.model_validate({"id": 7, "name": "Rosa", "creditLimit": 200, "debt": 50})
    assert seller.id == "7"
    assert seller.current_debt == Decimal("50")
    info = seller.credit_info()
    assert info.available == Decimal("150.00")
    assert not info.is_overdrawn
    assert seller.to_payload()["currentDebt"] == 50.0


def test_overdrawn_seller():
    seller = Seller(id="S9", credit_limit=100, current_debt=130)
    assert seller.credit_info().is_overdrawn


def test_order_ownership_and_dispatchable_status():
    by_user = Order.model_validate({"id": "O1", "status": "pendiente", "user": {"id": "S1"}})
    by_user_id = Order.model_validate({"id": "O2", "status": "entregado_parcial", "userId": "S1"})
    delivered = Order.model_validate({"id": "O3", "status": "entregado", "userId": "S1"})

    assert by_user.is_dispatchable_for("S1")
    assert by_user_id.is_dispatchable_for("S1")
    assert not by_user.is_dispatchable_for("S2")
    assert not delivered.is_dispatchable_for("S1")
    assert delivered.is_fully_delivered


def test_order_item_without_delivered_defaults_to_zero():
    order = Order.model_validate({"id": "O1", "items": [{"productId": "P1", "quantity": 4, "quantityDelivered": None}]})
    assert order.items[0].quantity_delivered == 0
    assert order.items[0].pending == 4


def test_daily_load_payload_is_camel_case_and_keeps_unknown_fields():
    load = DailyLoad.model_validate({
        "id": "L1", "sellerId": "S1", "date": "2026-10-18", "status": "open",
        "order": {"id": "O1"}, "warehouseId": "W1",
        "items": [{"id": "I1", "productId": "P1", "quantityOut": 3, "unitPrice": "2.5"}],
    })
    payload = load.to_payload()
    assert payload["sellerId"] == "S1"
    assert payload["order"] == {"id": "O1"}
    assert payload["warehouseId"] == "W1"
    assert payload["items"][0] == {"id": "I1", "productId": "P1", "quantityOut": 3, "unitPrice": 2.5}
    assert payload["assetMovements"] == []
    assert "paymentAmount" not in payload


def test_daily_load_seller_resolution_and_value():
    embedded = DailyLoad.model_validate({
        "date": "2026-10-18", "seller": {"id": "S2"},
        "items": [{"quantityOut": 2, "unitPrice": 2.5}, {"quantityOut": 1, "unitPrice": 4}],
    })
    assert embedded.resolved_seller_id == "S2"
    assert embedded.computed_load_value() == Decimal("9.00")

    with_total = embedded.model_copy(update={"total_load_value": Decimal("12.00")})
    assert with_total.computed_load_value() == Decimal("12.00")


def test_daily_load_rejects_unknown_status():
    with pytest.raises(ValidationError):
        DailyLoad.model_validate({"date": "2026-10-18", "status": "archived"})


def test_null_lists_from_backend_become_empty():
    load = DailyLoad.model_validate({
        "id": "L9", "sellerId": "S1", "date": "2026-10-19", "status": "open",
        "items": None, "assetMovements": None,
    })
    order = Order.model_validate({"id": "O9", "status": "pendiente", "items": None})
    assert load.items == []
    assert load.asset_movements == []
    assert load.computed_load_value() == Decimal("0")
    assert order.items == []


def test_order_item_key_prefers_item_id():
    order = Order.model_validate({"id": "O1", "items": [
        {"id": "OI1", "productId": "P1"},
        {"productId": "P2"},
    ]})
    assert [item.key for item in order.items] == ["OI1", "P2"]
