"""Tests for the Flask API surface."""
from __future__ import annotations

import json
import threading
import time

from scanpos.api.app import create_app
from scanpos.core.di import bootstrap_di
from scanpos.core.settings import Settings
from scanpos.domain.services.cart_ledger import CartLedger
from scanpos.repo.kv_store import MemoryKeyValueStore


class SlowFirstWrite(MemoryKeyValueStore):
    """Store cuja primeira escrita demora, abrindo janela para requisições sobrepostas."""

    def __init__(self):
        super().__init__()
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        if self.writes == 1:
            time.sleep(0.3)
        super().set(key, value)


def test_healthz(client):
    assert client.get("/healthz").get_json() == {"ok": True}


def test_generate_payload(client):
    res = client.post("/products/payload", json={"name": "Widget", "cost": 2.5})
    assert res.status_code == 200
    assert res.get_json()["payload"] == "Widget|2.5"


def test_generate_payload_invalid(client):
    assert client.post("/products/payload", json={"name": "", "cost": 2.5}).status_code == 400
    assert client.post("/products/payload", json={"name": "A|B", "cost": 2.5}).status_code == 400
    assert client.post("/products/payload", json={"name": "Widget"}).status_code == 400


def test_scan_flow(client):
    res = client.post("/scan", json={"payload": "Widget|2.5\r\n"})
    assert res.status_code == 200
    body = res.get_json()
    assert body["items"] == [{"name": "Widget", "unit_cost": 2.5, "quantity": 1}]
    assert body["total_display"] == "2.50"
    assert body["persisted"] is True

    body = client.post("/scan", json={"payload": "Widget|2.5"}).get_json()
    assert body["items"][0]["quantity"] == 2
    assert body["total"] == 5.0

    body = client.post("/cart/items/0/adjust", json={"delta": -1}).get_json()
    assert body["items"][0]["quantity"] == 1

    body = client.post("/cart/items/0/adjust", json={"delta": -1}).get_json()
    assert body["items"] == []
    assert body["total_display"] == "0.00"


def test_scan_unreadable(client):
    res = client.post("/scan", json={"payload": "Widget-2.50"})
    assert res.status_code == 422
    assert res.get_json() == {"error": "could not read code, try again", "reason": "malformed"}
    assert client.get("/cart").get_json()["items"] == []


def test_scan_missing_payload(client):
    assert client.post("/scan", json={}).status_code == 400


def test_remove_out_of_range(client):
    client.post("/scan", json={"payload": "Widget|2.5"})
    client.post("/scan", json={"payload": "Gadget|10"})
    body = client.delete("/cart/items/5").get_json()
    assert [i["name"] for i in body["items"]] == ["Widget", "Gadget"]
    body = client.delete("/cart/items/0").get_json()
    assert [i["name"] for i in body["items"]] == ["Gadget"]


def test_adjust_requires_integer_delta(client):
    client.post("/scan", json={"payload": "Widget|2.5"})
    assert client.post("/cart/items/0/adjust", json={"delta": "x"}).status_code == 400


def test_write_failure_is_flagged(client, store):
    store.fail_writes = True
    body = client.post("/scan", json={"payload": "Widget|2.5"}).get_json()
    assert body["persisted"] is False
    assert body["warning"] == "changes may not survive a restart"
    assert body["items"][0]["name"] == "Widget"


def test_complete_order(client, store):
    client.post("/scan", json={"payload": "Widget|2.5"})
    client.post("/scan", json={"payload": "Gadget|10"})
    res = client.post("/cart/complete")
    assert res.get_json() == {"ok": True, "total": 12.5, "total_display": "12.50"}
    assert client.get("/cart").get_json()["items"] == []
    assert store.get("scanned_cart") is None


def test_complete_order_failure_keeps_cart(client, store):
    client.post("/scan", json={"payload": "Widget|2.5"})
    store.fail_writes = True
    res = client.post("/cart/complete")
    assert res.status_code == 503
    assert res.get_json()["cart"]["items"][0]["name"] == "Widget"
    assert client.get("/cart").get_json()["total"] == 2.5


def test_generate_payload_rejects_padded_name(client):
    res = client.post("/products/payload", json={"name": " Widget", "cost": 2.5})
    assert res.status_code == 400


def test_generated_payload_scans_back(client):
    payload = client.post("/products/payload", json={"name": "Widget Pro", "cost": 2.5}).get_json()["payload"]
    body = client.post("/scan", json={"payload": payload}).get_json()
    assert body["items"] == [{"name": "Widget Pro", "unit_cost": 2.5, "quantity": 1}]


def test_overlapping_scans_keep_store_in_sync():
    store = SlowFirstWrite()
    bootstrap_di(Settings(storage_backend="memory"), store=store)
    app = create_app(bootstrap=False)
    responses = []

    def scan():
        responses.append(app.test_client().post("/scan", json={"payload": "Widget|2.5"}).get_json())

    worker = threading.Thread(target=scan)
    worker.start()
    time.sleep(0.05)
    scan()
    worker.join()

    assert all(r["persisted"] for r in responses)
    memory = app.test_client().get("/cart").get_json()["items"]
    stored = json.loads(store.get("scanned_cart"))
    assert memory[0]["quantity"] == 2
    assert stored[0]["quantity"] == 2
    assert CartLedger(store).load()[0].quantity == 2


def test_sql_backend_survives_restart(tmp_path):
    settings = Settings(storage_backend="sql", database_url=f"sqlite:///{tmp_path / 'cart.db'}")
    bootstrap_di(settings)
    create_app(bootstrap=False).test_client().post("/scan", json={"payload": "Widget|2.5"})

    bootstrap_di(settings)
    body = create_app(bootstrap=False).test_client().get("/cart").get_json()
    assert body["items"] == [{"name": "Widget", "unit_cost": 2.5, "quantity": 1}]
    assert body["total"] == 2.5
