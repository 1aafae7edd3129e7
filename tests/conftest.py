from typing import List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from despachos.domain.models.asset import Asset, AssetStatus
from despachos.domain.models.daily_load import DailyLoad, LoadStatus
from despachos.domain.models.order import Order
from despachos.domain.models.seller import Seller
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.infrastructure.persistence import models  # noqa: F401
from despachos.infrastructure.persistence.database import Base
from despachos.infrastructure.persistence.settlement_journal_adapter import SQLAlchemySettlementJournal


class FakeBackend(LogisticsBackend):
    """Backend en memoria que registra cada llamada de escritura."""

    def __init__(self, sellers=None, orders=None, assets=None, loads=None):
        self.sellers: List[Seller] = [Seller.model_validate(s) for s in sellers or []]
        self.orders: List[Order] = [Order.model_validate(o) for o in orders or []]
        self.assets: List[Asset] = [Asset.model_validate(a) for a in assets or []]
        self.loads: List[DailyLoad] = [DailyLoad.model_validate(l) for l in loads or []]
        self.created: List[DailyLoad] = []
        self.closed: List[tuple] = []
        self.payments: List[tuple] = []
        self.updated_assets: List[tuple] = []
        self.seller_writes: List[tuple] = []
        self.fail_create: Optional[Exception] = None
        self.fail_close: Optional[Exception] = None
        self.read_calls = 0

    def list_sellers(self):
        self.read_calls += 1
        return list(self.sellers)

    def list_orders(self):
        self.read_calls += 1
        return list(self.orders)

    def list_assets(self, scope=None):
        self.read_calls += 1
        return [a for a in self.assets if scope is None or a.scope == scope]

    def list_daily_loads(self):
        self.read_calls += 1
        return list(self.loads)

    def create_daily_load(self, load):
        if self.fail_create is not None:
            raise self.fail_create
        self.created.append(load)
        created = load.model_copy(update={"id": f"load-{len(self.created)}"})
        checked_out = {m.asset.id for m in load.asset_movements}
        for asset in self.assets:
            if asset.id in checked_out:
                asset.status = AssetStatus.EN_USO.value
        self.loads.append(created)
        return created

    def close_daily_load(self, load_id, load):
        if self.fail_close is not None:
            raise self.fail_close
        self.closed.append((load_id, load))
        return load.model_copy(update={"status": LoadStatus.CLOSED})

    def register_payment(self, seller_id, amount, note=None):
        self.payments.append((seller_id, amount, note))

    def create_asset(self, asset):
        created = asset.model_copy(update={"id": f"asset-{len(self.assets) + 1}"})
        self.assets.append(created)
        return created

    def update_asset(self, asset_id, asset):
        self.assets = [asset if a.id == asset_id else a for a in self.assets]
        self.updated_assets.append((asset_id, asset))
        return asset

    def create_seller(self, seller, password=None):
        created = seller.model_copy(update={"id": f"seller-{len(self.sellers) + 1}"})
        self.sellers.append(created)
        self.seller_writes.append(("create", created, password))
        return created

    def update_seller(self, seller_id, seller, password=None):
        self.sellers = [seller if s.id == seller_id else s for s in self.sellers]
        self.seller_writes.append(("update", seller, password))
        return seller


SELLERS = [
    {"id": "S1", "name": "Juan Pérez", "dni": "40123456", "email": "juan@heladeria.pe", "creditLimit": 200, "currentDebt": 50},
    {"id": "S2", "name": "Rosa Quispe", "dni": "41234567", "email": "rosa@heladeria.pe", "creditLimit": 300, "debt": 50},
    {"id": "S3", "name": "Luis Mamani", "dni": "42345678", "email": "luis@heladeria.pe", "creditLimit": 100, "currentDebt": 100},
]

ORDERS = [
    {
        "id": "O1", "orderNumber": "PED-001", "status": "pendiente", "total": 25,
        "user": {"id": "S1"},
        "items": [{"id": "OI1", "productId": "P1", "productName": "Paleta de fresa",
                   "quantity": 10, "quantityDelivered": 0, "price": 2.5}],
    },
    {
        "id": "O2", "orderNumber": "PED-002", "status": "entregado_parcial", "total": 48,
        "userId": "S1",
        "items": [
            {"id": "OI2", "productId": "P2", "productName": "Sándwich de vainilla",
             "quantity": 8, "quantityDelivered": 3, "price": 3},
            {"id": "OI3", "productId": "P3", "productName": "Cono de chocolate",
             "quantity": 6, "quantityDelivered": 6, "price": 4},
        ],
    },
    {"id": "O3", "orderNumber": "PED-003", "status": "entregado", "total": 50, "userId": "S2", "items": []},
    {"id": "O4", "orderNumber": "PED-004", "status": "pendiente", "total": 10, "userId": "S2",
     "items": [{"productId": "P1", "productName": "Paleta de fresa", "quantity": 4, "price": 2.5}]},
    {"id": "O5", "orderNumber": "PED-005", "status": "entregado", "total": 12, "userId": "S1", "items": []},
]

ASSETS = [
    {"id": "A1", "code": "TRI-01", "name": "Triciclo 1", "type": "triciclo", "scope": "CLIENT", "status": "disponible"},
    {"id": "A2", "code": "TRI-02", "name": "Triciclo 2", "type": "triciclo", "scope": "CLIENT", "status": "en_uso"},
    {"id": "A3", "code": "CON-01", "name": "Congeladora 1", "type": "congeladora", "scope": "COMPANY", "status": "disponible"},
    {"id": "A4", "code": "CON-02", "name": "Congeladora 2", "type": "congeladora", "scope": "CLIENT", "status": "disponible"},
]

LOADS = [
    {
        "id": "L1", "sellerId": "S1", "order": {"id": "O1"}, "date": "2026-10-18", "status": "open",
        "items": [{"id": "I1", "productId": "P1", "productName": "Paleta de fresa", "quantityOut": 4, "unitPrice": 2.5}],
        "assetMovements": [{"id": "M1", "asset": {"id": "A2", "code": "TRI-02", "name": "Triciclo 2"},
                            "checkOutTime": "2026-10-18T07:00:00"}],
        "totalLoadValue": 10,
    },
    {
        "id": "L2", "seller": {"id": "S2", "name": "Rosa Quispe"}, "order": {"id": "O3"},
        "date": "2026-10-18", "status": "open",
        "items": [{"id": "I2", "productId": "P1", "quantityOut": 2, "unitPrice": 2.5}],
        "assetMovements": [],
    },
    {"id": "L3", "sellerId": "S1", "order": {"id": "O2"}, "date": "2026-10-17", "status": "closed",
     "items": [], "assetMovements": []},
    {"id": "L4", "sellerId": "S1", "order": {"id": "O2"}, "date": "2026-10-19", "status": "open",
     "items": [{"id": "I4", "productId": "P2", "quantityOut": 5, "unitPrice": 3}], "assetMovements": []},
]


@pytest.fixture
def backend():
    return FakeBackend(sellers=SELLERS, orders=ORDERS, assets=ASSETS, loads=LOADS)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def journal(db_session):
    return SQLAlchemySettlementJournal(db_session)
