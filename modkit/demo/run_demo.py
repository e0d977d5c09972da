#!/usr/bin/env python3
"""modkit service demo.

Usage (with the service running, e.g. ``uvicorn modkit.service.app:app``):
    MODKIT_SERVICE_URL=http://localhost:8000 python -m modkit.demo.run_demo

The script:
1. Evaluates a few residue operations modulo 998244353.
2. Builds a combinatorics table modulo 1000000007.
3. Runs choose / factorial queries against it.
4. Requests the same table again to show it is cached.
5. Sends invalid requests to show the error responses.
6. Dumps the query journal.
"""

from __future__ import annotations

import sys

import httpx

from modkit.config import MOD1000000007_VALUE, MOD998244353_VALUE, SERVICE_URL


TABLE_BOUND = 100_000


def banner(msg: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}")


def run(client: httpx.Client) -> None:
    # ---- 1. Arithmetic ----
    banner("1) Residue arithmetic mod 998244353")
    for body in (
        {"op": "add", "a": MOD998244353_VALUE - 1, "b": 2},
        {"op": "mul", "a": 2, "b": 3},
        {"op": "inv", "a": 2},
        {"op": "pow", "a": 3, "exponent": 5_000_000_000_000_000},
    ):
        r = client.post("/modint/eval", json={"modulus": MOD998244353_VALUE, **body})
        r.raise_for_status()
        print(f"   {body} -> {r.json()['value']}")

    # ---- 2. Build table ----
    banner(f"2) Build table N={TABLE_BOUND} mod 1000000007")
    table = {"bound": TABLE_BOUND, "modulus": MOD1000000007_VALUE}
    r = client.post("/tables", json=table)
    r.raise_for_status()
    print(f"   {r.json()}")

    # ---- 3. Queries ----
    banner("3) Queries")
    for n, k in ((4, 2), (3, 3), (TABLE_BOUND, TABLE_BOUND // 2)):
        r = client.post("/choose", json={**table, "n": n, "k": k})
        r.raise_for_status()
        print(f"   C({n}, {k}) = {r.json()['value']}")
    r = client.post("/factorial", json={**table, "n": 20})
    r.raise_for_status()
    print(f"   20! = {r.json()['value']}")

    # ---- 4. Cache ----
    banner("4) Request the same table again")
    r = client.post("/tables", json=table)
    r.raise_for_status()
    print(f"   cached = {r.json()['cached']}")

    # ---- 5. Errors ----
    banner("5) Invalid requests")
    r = client.post("/modint/eval", json={"modulus": 6, "op": "inv", "a": 3})
    print(f"   inv(3) mod 6      -> {r.status_code} {r.json()['detail']}")
    r = client.post("/choose", json={**table, "n": 2, "k": 3})
    print(f"   C(2, 3)           -> {r.status_code} {r.json()['detail']}")
    r = client.post("/factorial", json={**table, "n": TABLE_BOUND + 1})
    print(f"   ({TABLE_BOUND + 1})!       -> {r.status_code} {r.json()['detail']}")

    # ---- 6. Journal ----
    banner("6) Query journal")
    r = client.get("/journal")
    r.raise_for_status()
    journal = r.json()
    for entry in journal["entries"]:
        print(f"   {entry['event']:<14} {entry['data']}")
    print(f"   chain_valid = {journal['chain_valid']}")


def main() -> None:
    with httpx.Client(base_url=SERVICE_URL, timeout=60.0) as client:
        try:
            run(client)
        except httpx.HTTPError as exc:
            print(f"\nRequest failed: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
