"""modkit FastAPI application.

Exposes residue arithmetic and combinatorics tables over HTTP:

- ``POST /modint/eval``        one arithmetic operation on residues
- ``POST /tables``             build (or reuse) a table for (bound, modulus)
- ``POST /choose``             nCk from the table for (bound, modulus)
- ``POST /factorial``          n! from the table
- ``POST /inverse_factorial``  (n!)^-1 from the table
- ``GET  /journal``            hash-chained record of service events

Tables are cached per (bound, modulus) pair, least recently used first
out once ``MAX_CACHED_TABLES`` is exceeded; they are built in the
threadpool, off the event loop.  Precondition violations
answer 400, out-of-range table indices 404.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Dict, List, Literal, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from modkit.arith.modint import ModInt, Modulus
from modkit.combinatorics.table import CombinatorialTable
from modkit.config import MAX_CACHED_TABLES, MAX_JOURNAL_ENTRIES, MAX_SERVICE_TABLE_BOUND
from modkit.service.journal import QueryJournal

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(title="modkit")

# ---------------------------------------------------------------------------
# In-memory state
# ---------------------------------------------------------------------------

# (bound, modulus) -> built table, oldest use first
_tables: "OrderedDict[Tuple[int, int], CombinatorialTable]" = OrderedDict()
_journal = QueryJournal(max_entries=MAX_JOURNAL_ENTRIES)
# Guards _tables and _journal; table builds run in worker threads
_state_lock = threading.Lock()

# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class ModIntEvalRequest(BaseModel):
    modulus: int
    op: Literal["add", "sub", "mul", "div", "neg", "inv", "pow"]
    a: int
    b: Optional[int] = None  # binary ops
    exponent: Optional[int] = None  # pow only


class TableRequest(BaseModel):
    bound: int
    modulus: int


class TableQuery(TableRequest):
    n: int
    k: Optional[int] = None  # choose only


class ValueResponse(BaseModel):
    value: int


class TableResponse(BaseModel):
    bound: int
    modulus: int
    cached: bool


class JournalResponse(BaseModel):
    entries: List[Dict[str, Any]]
    chain_valid: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _record(event: str, data: Dict[str, Any]) -> None:
    with _state_lock:
        _journal.append(event, data)


def _reject(status: int, exc: Exception, data: Dict[str, Any]) -> HTTPException:
    """Journal a failed request and build the matching HTTP error."""
    _record("error", {**data, "status": status, "detail": str(exc)})
    return HTTPException(status, str(exc))


def _cached_table(key: Tuple[int, int]) -> Optional[CombinatorialTable]:
    with _state_lock:
        table = _tables.get(key)
        if table is not None:
            _tables.move_to_end(key)
            _journal.append("table_reused", {"bound": key[0], "modulus": key[1]})
        return table


async def _get_table(bound: int, modulus: int) -> Tuple[CombinatorialTable, bool]:
    """Return the table for (bound, modulus) and whether it was cached.

    The build runs in the threadpool so other requests are served while a
    large table is being computed.  Two concurrent requests for the same
    missing pair may both build it; the first one stored wins.
    """
    key = (bound, modulus)
    table = _cached_table(key)
    if table is not None:
        return table, True

    if bound > MAX_SERVICE_TABLE_BOUND:
        raise _reject(
            400,
            ValueError(f"bound {bound} exceeds service limit {MAX_SERVICE_TABLE_BOUND}"),
            {"bound": bound, "modulus": modulus},
        )
    try:
        built = await run_in_threadpool(CombinatorialTable, bound, modulus)
    except (ValueError, ArithmeticError) as exc:
        raise _reject(400, exc, {"bound": bound, "modulus": modulus}) from exc

    with _state_lock:
        table = _tables.setdefault(key, built)
        _tables.move_to_end(key)
        while len(_tables) > MAX_CACHED_TABLES:
            _tables.popitem(last=False)
        _journal.append("table_built", {"bound": bound, "modulus": modulus})
    return table, False


def _evaluate(req: ModIntEvalRequest) -> ModInt:
    mod = Modulus(req.modulus)
    a = mod(req.a)
    if req.op == "neg":
        return -a
    if req.op == "inv":
        return a.inverse()
    if req.op == "pow":
        if req.exponent is None:
            raise ValueError("pow needs an exponent")
        return a.pow(req.exponent)

    if req.b is None:
        raise ValueError(f"{req.op} needs a second operand b")
    b = mod(req.b)
    if req.op == "add":
        return a + b
    if req.op == "sub":
        return a - b
    if req.op == "mul":
        return a * b
    return a / b


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post("/modint/eval", response_model=ValueResponse)
async def modint_eval(req: ModIntEvalRequest):
    """Evaluate a single residue operation."""
    try:
        result = _evaluate(req)
    except (ValueError, ArithmeticError) as exc:
        raise _reject(400, exc, {"op": req.op, "modulus": req.modulus}) from exc
    _record("modint_eval", {"op": req.op, "modulus": req.modulus})
    return ValueResponse(value=result.value)


@app.post("/tables", response_model=TableResponse)
async def build_table(req: TableRequest):
    """Build the table for (bound, modulus) unless it is already cached."""
    table, cached = await _get_table(req.bound, req.modulus)
    return TableResponse(bound=table.bound, modulus=table.modulus.value, cached=cached)


@app.post("/choose", response_model=ValueResponse)
async def choose(req: TableQuery):
    if req.k is None:
        raise _reject(400, ValueError("choose needs k"), {"n": req.n})
    table, _ = await _get_table(req.bound, req.modulus)
    try:
        result = table.choose(req.n, req.k)
    except IndexError as exc:
        raise _reject(404, exc, {"n": req.n, "k": req.k}) from exc
    except ValueError as exc:
        raise _reject(400, exc, {"n": req.n, "k": req.k}) from exc
    return ValueResponse(value=result.value)


@app.post("/factorial", response_model=ValueResponse)
async def factorial(req: TableQuery):
    table, _ = await _get_table(req.bound, req.modulus)
    try:
        result = table.factorial(req.n)
    except IndexError as exc:
        raise _reject(404, exc, {"n": req.n}) from exc
    return ValueResponse(value=result.value)


@app.post("/inverse_factorial", response_model=ValueResponse)
async def inverse_factorial(req: TableQuery):
    table, _ = await _get_table(req.bound, req.modulus)
    try:
        result = table.inverse_factorial(req.n)
    except IndexError as exc:
        raise _reject(404, exc, {"n": req.n}) from exc
    return ValueResponse(value=result.value)


@app.get("/journal", response_model=JournalResponse)
async def journal():
    with _state_lock:
        return JournalResponse(entries=_journal.entries(), chain_valid=_journal.verify_chain())
