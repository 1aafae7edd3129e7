from decimal import Decimal

import pytest

from despachos.domain.exceptions import (
    InvalidAmount,
    InvalidAssetCondition,
    InvalidQuantity,
    LoadAlreadyClosed,
    OverpaymentError,
    UnderpaymentOnFinalDelivery,
    UnknownLoadItem,
)
from despachos.domain.models.daily_load import DailyLoad
from despachos.domain.services.settlement_draft import DraftState, SettlementDraft


def make_load(**overrides):
    data = {
        "id": "L1", "sellerId": "S1", "order": {"id": "O1"}, "date": "2026-10-18", "status": "open",
        "items": [
            {"id": "I1", "productId": "P1", "productName": "Paleta de fresa", "quantityOut": 4, "unitPrice": 2.5},
            {"id": "I2", "productId": "P2", "productName": "Cono", "quantityOut": 2, "unitPrice": 4},
        ],
        "assetMovements": [
            {"id": "M1", "asset": {"id": "A1", "code": "TRI-01"}, "checkOutTime": "2026-10-18T07:00:00"},
            {"id": "M2", "asset": {"id": "A4", "code": "CON-02"}},
        ],
    }
    data.update(overrides)
    return DailyLoad.model_validate(data)


def make_draft(debt=100, order_status="pendiente", **overrides):
    return SettlementDraft(make_load(**overrides), current_debt=debt, order_status=order_status)


def test_defaults_for_untouched_inputs():
    draft = make_draft()
    assert {k: (r.good, r.bad) for k, r in draft.returns.items()} == {"I1": (0, 0), "I2": (0, 0)}
    assert draft.asset_conditions == {"M1": "bueno", "M2": "bueno"}
    assert draft.payment_amount == Decimal("0")


def test_payment_above_debt_is_overpaying():
    draft = make_draft(debt=100)
    draft.set_payment("100.01")
    assert draft.is_overpaying
    assert not draft.can_close
    with pytest.raises(OverpaymentError):
        draft.validate()

    draft.set_payment(100)
    assert not draft.is_overpaying
    draft.validate()


def test_final_delivery_requires_full_payment():
    draft = make_draft(debt=50, order_status="entregado")
    assert draft.is_order_fully_delivered
    draft.set_payment(49)
    assert draft.is_underpaying_final
    with pytest.raises(UnderpaymentOnFinalDelivery):
        draft.validate()

    draft.set_payment(50)
    assert not draft.is_underpaying_final
    assert draft.can_close
    assert draft.new_debt_balance == Decimal("0")


def test_one_cent_short_on_final_delivery_is_rejected():
    draft = make_draft(debt="50.00", order_status="entregado")
    draft.set_payment("49.99")
    assert draft.is_underpaying_final


def test_partial_order_accepts_zero_payment():
    draft = make_draft(debt=50, order_status="pendiente")
    draft.set_payment(0)
    draft.validate()
    assert draft.can_close
    assert draft.new_debt_balance == Decimal("50")


def test_payment_input_parsing():
    draft = make_draft()
    draft.set_payment("30.5")
    assert draft.payment_amount == Decimal("30.50")
    draft.set_payment("")
    assert draft.payment_amount == Decimal("0")

    draft.set_payment(20)
    for bad in ("abc", "-5", -1, "1e30"):
        with pytest.raises(InvalidAmount):
            draft.set_payment(bad)
    assert draft.payment_amount == Decimal("20")


def test_set_return_values():
    draft = make_draft()
    draft.set_return("I1", good="3", bad=1)
    draft.set_return("I2", bad="")
    assert (draft.returns["I1"].good, draft.returns["I1"].bad) == (3, 1)
    assert (draft.returns["I2"].good, draft.returns["I2"].bad) == (0, 0)

    draft.set_return("I1", good=2)
    assert (draft.returns["I1"].good, draft.returns["I1"].bad) == (2, 1)

    with pytest.raises(InvalidQuantity):
        draft.set_return("I1", good=1, bad="x")
    assert (draft.returns["I1"].good, draft.returns["I1"].bad) == (2, 1)

    with pytest.raises(UnknownLoadItem):
        draft.set_return("I9", good=1)


def test_returns_above_dispatched_are_reported_not_blocked():
    draft = make_draft()
    draft.set_return("I2", good=2, bad=1)
    assert draft.returns_exceeding_dispatch() == ["I2"]
    draft.validate()


def test_asset_conditions():
    draft = make_draft()
    draft.set_asset_condition("M1", "dañado")
    draft.set_asset_condition("M2", "mantenimiento")
    assert draft.asset_conditions == {"M1": "dañado", "M2": "mantenimiento"}

    with pytest.raises(InvalidAssetCondition):
        draft.set_asset_condition("M1", "perdido")
    with pytest.raises(InvalidAssetCondition):
        draft.set_asset_condition("M9", "bueno")


def test_close_request_carries_returns_conditions_and_payment():
    draft = make_draft(debt=100)
    draft.set_return("I1", good=1, bad=1)
    draft.set_asset_condition("M2", "dañado")
    draft.set_payment("25")

    payload = draft.build_close_request().to_payload()

    assert payload["id"] == "L1"
    assert payload["sellerId"] == "S1"
    assert payload["order"] == {"id": "O1"}
    assert payload["paymentAmount"] == 25.0
    assert [(i["id"], i["quantityIn"], i["quantityBad"]) for i in payload["items"]] == [("I1", 1, 1), ("I2", 0, 0)]
    assert payload["assetMovements"] == [
        {"id": "M1", "asset": {"id": "A1", "code": "TRI-01"}, "statusIn": "bueno"},
        {"id": "M2", "asset": {"id": "A4", "code": "CON-02"}, "statusIn": "dañado"},
    ]


def test_total_load_value_falls_back_to_lines():
    assert make_draft().total_load_value == Decimal("18.00")
    assert make_draft(totalLoadValue=20).total_load_value == Decimal("20.00")


def test_closed_load_cannot_be_drafted():
    with pytest.raises(LoadAlreadyClosed):
        make_draft(status="closed")


def test_state_transitions():
    draft = make_draft(debt=10)
    draft.set_payment(5)
    draft.begin_closing()
    assert draft.state == DraftState.CLOSING
    with pytest.raises(LoadAlreadyClosed):
        draft.set_payment(6)
    with pytest.raises(LoadAlreadyClosed):
        draft.begin_closing()

    draft.reopen()
    assert draft.state == DraftState.OPEN
    draft.begin_closing()
    draft.mark_closed()
    assert draft.state == DraftState.CLOSED
    assert not draft.load.is_open
    draft.reopen()
    assert draft.state == DraftState.CLOSED


def test_invalid_payment_blocks_begin_closing():
    draft = make_draft(debt=10)
    draft.set_payment(11)
    with pytest.raises(OverpaymentError):
        draft.begin_closing()
    assert draft.state == DraftState.OPEN
