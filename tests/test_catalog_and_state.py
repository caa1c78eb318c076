from types import SimpleNamespace

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tablepos.models  # noqa: F401
from tablepos.core.database import Base, get_db
from tablepos.core.defaults import DEFAULT_DISHES, DEFAULT_TABLES
from tablepos.deps import commit_or_conflict
from tablepos.models.dish import Dish
from tablepos.models.order import Order
from tablepos.routers.state import router as state_router
from tablepos.services import catalog
from tablepos.services import orders as order_service
from tablepos.services.bootstrap import seed_defaults
from tablepos.services.cart import apply_selection
from tablepos.services.errors import NotFound, ValidationFailure
from tablepos.services.snapshot import export_state, import_state

NO_FEE = SimpleNamespace(is_service_fee_enabled=False, service_fee_rate=0.1, is_gps_enabled=False)


def _build_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal()


def test_seed_fills_only_empty_collections():
    db = _build_session()

    first = seed_defaults(db)
    db.commit()
    catalog.set_dish_availability(db, "c1", False)
    second = seed_defaults(db)

    assert first == {"dishes": len(DEFAULT_DISHES), "tables": len(DEFAULT_TABLES), "config": 1}
    assert second == {"dishes": 0, "tables": 0, "config": 0}
    assert db.get(Dish, "c1").is_available is False
    assert catalog.get_config(db).restaurant_name == "Don Gus Coffee"


def test_dish_edit_does_not_touch_existing_lines():
    db = _build_session()
    seed_defaults(db)
    order, _ = order_service.start_order(db, "tab1")
    apply_selection(order, "c1", 1, NO_FEE, dish=catalog.get_dish(db, "c1"), option="Hot")
    captured_price = order.order_items[0].price

    catalog.save_dish(
        db,
        {"name": "House Americano", "category": "Coffee", "price": captured_price + 40, "options": ["Hot"]},
        dish_id="c1",
    )

    assert order.order_items[0].price == captured_price
    assert order.order_items[0].name != "House Americano"
    assert catalog.get_dish(db, "c1").price == captured_price + 40


def test_save_dish_validates_payload():
    db = _build_session()

    with pytest.raises(ValidationFailure):
        catalog.save_dish(db, {"name": " ", "category": "Tea", "price": 10})
    with pytest.raises(ValidationFailure):
        catalog.save_dish(db, {"name": "Tea", "category": "Tea", "price": -1})
    with pytest.raises(NotFound):
        catalog.save_dish(db, {"name": "Tea", "category": "Tea", "price": 1}, dish_id="missing")


def test_update_config_guards_radius_and_rate():
    db = _build_session()

    with pytest.raises(ValidationFailure):
        catalog.update_config(db, {"gps_radius_m": -5})
    with pytest.raises(ValidationFailure):
        catalog.update_config(db, {"service_fee_rate": 2})

    updated = catalog.update_config(db, {"is_gps_enabled": True, "unknown_field": "ignored"})
    assert updated.is_gps_enabled is True


def test_export_then_import_restores_every_collection():
    source = _build_session()
    seed_defaults(source)
    order, _ = order_service.start_order(source, "tab2")
    apply_selection(order, "c1", 1, NO_FEE, dish=catalog.get_dish(source, "c1"), option="Iced", note="no ice")
    order_service.submit_order(source, order, NO_FEE)
    source.commit()

    exported = export_state(source)

    target = _build_session()
    seed_defaults(target)
    counts = import_state(target, exported)
    target.commit()

    assert counts == {"tables": len(DEFAULT_TABLES), "orders": 1, "dishes": len(DEFAULT_DISHES)}
    restored = target.get(Order, order.id)
    assert restored.status == "SUBMITTED"
    assert restored.random_code == order.random_code
    assert [(item.dish_id, item.selected_option, item.custom_note) for item in restored.order_items] == [
        ("c1", "Iced", "no ice")
    ]
    assert export_state(target)["orders"][0]["total_amount"] == exported["orders"][0]["total_amount"]


def test_state_endpoint_replaces_everything():
    db = _build_session()
    seed_defaults(db)
    db.commit()

    app = FastAPI()
    app.include_router(state_router)
    app.dependency_overrides[get_db] = lambda: db
    client = TestClient(app)

    snapshot = client.get("/api/state").json()
    snapshot["tables"] = snapshot["tables"][:1]
    snapshot["dishes"] = []

    replaced = client.put("/api/state", json=snapshot)
    assert replaced.status_code == 200
    assert replaced.json() == {"ok": True, "tables": 1, "orders": 0, "dishes": 0}
    assert len(client.get("/api/state").json()["tables"]) == 1

    broken = client.put("/api/state", json={"tables": [{"id": "x"}]})
    assert broken.status_code == 422


def test_save_dish_rejects_an_id_already_in_use():
    db = _build_session()
    seed_defaults(db)

    with pytest.raises(ValidationFailure):
        catalog.save_dish(db, {"id": "c1", "name": "Copy", "category": "Coffee", "price": 10})

    assert catalog.get_dish(db, "c1").name != "Copy"


class FakeConstraintDb:
    def __init__(self):
        self.rolled_back = False

    def commit(self):
        raise IntegrityError("INSERT INTO dishes", {}, Exception("UNIQUE constraint failed: dishes.id"))

    def rollback(self):
        self.rolled_back = True


def test_constraint_violation_on_commit_is_a_conflict():
    db = FakeConstraintDb()

    with pytest.raises(HTTPException) as excinfo:
        commit_or_conflict(db)

    assert excinfo.value.status_code == 409
    assert excinfo.value.detail["code"] == "duplicate"
    assert db.rolled_back is True


def _state_client(db):
    app = FastAPI()
    app.include_router(state_router)
    app.dependency_overrides[get_db] = lambda: db
    return TestClient(app)


def test_snapshot_with_duplicate_ids_leaves_the_store_untouched():
    db = _build_session()
    seed_defaults(db)
    db.commit()
    client = _state_client(db)

    snapshot = client.get("/api/state").json()
    snapshot["tables"] = [snapshot["tables"][0], snapshot["tables"][0]]

    response = client.put("/api/state", json=snapshot)

    assert response.status_code == 400
    assert response.json()["detail"]["record_id"] == snapshot["tables"][0]["id"]
    assert len(client.get("/api/state").json()["tables"]) == len(DEFAULT_TABLES)


def test_snapshot_with_unknown_order_status_is_rejected():
    db = _build_session()
    seed_defaults(db)
    order, _ = order_service.start_order(db, "tab1")
    db.commit()
    client = _state_client(db)

    snapshot = client.get("/api/state").json()
    snapshot["orders"][0]["status"] = "LOST"

    response = client.put("/api/state", json=snapshot)

    assert response.status_code == 422
    assert db.get(Order, order.id).status == "ORDERING"
