"""HTTP tests for the modkit service using in-process ASGI clients."""

from __future__ import annotations

import asyncio
import time

import pytest
from fastapi.testclient import TestClient

from modkit.config import MAX_JOURNAL_ENTRIES, MOD1000000007_VALUE, MOD998244353_VALUE
from modkit.service import app as service_module
from modkit.service.journal import QueryJournal

TABLE = {"bound": 1000, "modulus": MOD1000000007_VALUE}


@pytest.fixture()
def client():
    """Fresh service state + test client."""
    service_module._tables.clear()
    service_module._journal = QueryJournal(max_entries=MAX_JOURNAL_ENTRIES)
    return TestClient(service_module.app)


def _eval(client, **body):
    return client.post("/modint/eval", json={"modulus": MOD998244353_VALUE, **body})


# ======================================================================
# /modint/eval
# ======================================================================


class TestModIntEval:
    def test_add_wraps(self, client):
        r = _eval(client, op="add", a=998244352, b=2)
        assert r.status_code == 200
        assert r.json() == {"value": 1}

    def test_sub_mul_div(self, client):
        assert _eval(client, op="sub", a=1, b=2).json()["value"] == 998244352
        assert _eval(client, op="mul", a=2, b=3).json()["value"] == 6
        assert _eval(client, op="div", a=6, b=2).json()["value"] == 3

    def test_neg_inv(self, client):
        assert _eval(client, op="neg", a=1).json()["value"] == 998244352
        assert _eval(client, op="inv", a=2).json()["value"] == 499122177

    def test_pow(self, client):
        r = _eval(client, op="pow", a=3, exponent=5_000_000_000_000_000)
        assert r.json()["value"] == 926495343

    def test_missing_operand(self, client):
        r = _eval(client, op="add", a=1)
        assert r.status_code == 400
        assert "second operand" in r.json()["detail"]

    def test_missing_exponent(self, client):
        assert _eval(client, op="pow", a=3).status_code == 400

    def test_not_invertible(self, client):
        r = client.post("/modint/eval", json={"modulus": 6, "op": "inv", "a": 3})
        assert r.status_code == 400
        assert "not invertible" in r.json()["detail"]

    def test_division_by_zero(self, client):
        assert _eval(client, op="div", a=1, b=0).status_code == 400

    def test_bad_modulus(self, client):
        r = client.post("/modint/eval", json={"modulus": 0, "op": "neg", "a": 3})
        assert r.status_code == 400

    def test_unknown_op(self, client):
        assert _eval(client, op="sqrt", a=4).status_code == 422


# ======================================================================
# Tables
# ======================================================================


class TestTables:
    def test_build_then_reuse(self, client):
        r1 = client.post("/tables", json=TABLE)
        assert r1.status_code == 200
        assert r1.json() == {**TABLE, "cached": False}
        r2 = client.post("/tables", json=TABLE)
        assert r2.json()["cached"] is True
        assert len(service_module._tables) == 1

    def test_choose(self, client):
        r = client.post("/choose", json={**TABLE, "n": 4, "k": 2})
        assert r.json() == {"value": 6}

    def test_factorial_queries(self, client):
        assert client.post("/factorial", json={**TABLE, "n": 5}).json()["value"] == 120
        r = client.post("/inverse_factorial", json={**TABLE, "n": 5})
        assert r.json()["value"] == 808_333_339

    def test_choose_k_greater_than_n(self, client):
        r = client.post("/choose", json={**TABLE, "n": 2, "k": 3})
        assert r.status_code == 400

    def test_choose_missing_k(self, client):
        assert client.post("/choose", json={**TABLE, "n": 2}).status_code == 400

    def test_out_of_range(self, client):
        assert client.post("/choose", json={**TABLE, "n": 1001, "k": 1}).status_code == 404
        assert client.post("/factorial", json={**TABLE, "n": 1001}).status_code == 404
        assert client.post("/inverse_factorial", json={**TABLE, "n": -1}).status_code == 404

    def test_bound_not_below_modulus(self, client):
        r = client.post("/tables", json={"bound": 13, "modulus": 13})
        assert r.status_code == 400
        assert not service_module._tables

    def test_bound_over_service_limit(self, client, monkeypatch):
        monkeypatch.setattr(service_module, "MAX_SERVICE_TABLE_BOUND", 10)
        r = client.post("/tables", json={"bound": 11, "modulus": 13})
        assert r.status_code == 400
        assert "service limit" in r.json()["detail"]

    def test_cache_eviction(self, client, monkeypatch):
        monkeypatch.setattr(service_module, "MAX_CACHED_TABLES", 2)
        for bound in (10, 11, 12):
            client.post("/tables", json={"bound": bound, "modulus": 13})
        assert list(service_module._tables) == [(11, 13), (12, 13)]

    def test_cache_reuse_refreshes_order(self, client, monkeypatch):
        monkeypatch.setattr(service_module, "MAX_CACHED_TABLES", 2)
        client.post("/tables", json={"bound": 10, "modulus": 13})
        client.post("/tables", json={"bound": 11, "modulus": 13})
        client.post("/tables", json={"bound": 10, "modulus": 13})
        client.post("/tables", json={"bound": 12, "modulus": 13})
        assert list(service_module._tables) == [(10, 13), (12, 13)]


# ======================================================================
# Journal
# ======================================================================


def test_journal_records_events(client):
    _eval(client, op="add", a=1, b=2)
    client.post("/tables", json=TABLE)
    client.post("/choose", json={**TABLE, "n": 2, "k": 3})

    body = client.get("/journal").json()
    events = [e["event"] for e in body["entries"]]
    assert events == ["modint_eval", "table_built", "table_reused", "error"]
    assert body["chain_valid"] is True


def test_journal_keeps_newest_entries(client):
    service_module._journal = QueryJournal(max_entries=2)
    _eval(client, op="add", a=1, b=2)
    _eval(client, op="mul", a=1, b=2)
    _eval(client, op="neg", a=1)

    body = client.get("/journal").json()
    assert len(body["entries"]) == 2
    assert body["chain_valid"] is True
    assert service_module._journal.dropped == 1


# ======================================================================
# Async client
# ======================================================================


@pytest.mark.asyncio
async def test_async_choose():
    from httpx import ASGITransport, AsyncClient

    service_module._tables.clear()
    service_module._journal = QueryJournal(max_entries=MAX_JOURNAL_ENTRIES)

    transport = ASGITransport(app=service_module.app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        resp = await c.post("/choose", json={**TABLE, "n": 1000, "k": 500})
        assert resp.status_code == 200
        first = resp.json()["value"]

        resp = await c.post("/choose", json={**TABLE, "n": 1000, "k": 500})
        assert resp.json()["value"] == first

        resp = await c.get("/journal")
        events = [e["event"] for e in resp.json()["entries"]]
        assert events == ["table_built", "table_reused"]


@pytest.mark.asyncio
async def test_table_build_does_not_block_other_requests():
    """A slow table build must leave the event loop free for other requests."""
    from httpx import ASGITransport, AsyncClient

    service_module._tables.clear()
    service_module._journal = QueryJournal()
    big = {"bound": 2_000_000, "modulus": MOD1000000007_VALUE}

    transport = ASGITransport(app=service_module.app)
    async with AsyncClient(transport=transport, base_url="http://test", timeout=120.0) as c:
        build = asyncio.create_task(c.post("/tables", json=big))
        await asyncio.sleep(0.05)

        start = time.perf_counter()
        resp = await c.post(
            "/modint/eval", json={"modulus": MOD998244353_VALUE, "op": "mul", "a": 2, "b": 3}
        )
        elapsed = time.perf_counter() - start
        assert resp.json() == {"value": 6}
        # Answered while the build is still running
        assert not build.done()

        resp = await build
        total = time.perf_counter() - start
        assert resp.status_code == 200
        assert resp.json()["cached"] is False
        assert elapsed < total / 2

    assert (2_000_000, MOD1000000007_VALUE) in service_module._tables
    service_module._tables.clear()
