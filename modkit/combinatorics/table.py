"""Factorial / inverse-factorial table for binomial coefficients mod M.

Construction is O(N + log M): factorials are accumulated forwards, a
single extended-Euclid inverse is taken of N!, and every other inverse
factorial is derived walking backwards via

    (i-1)!^-1 = i!^-1 * i

Queries are O(1).  Residues are held in packed ``array('Q')`` buffers and
returned as ``ModInt`` values of the table's modulus.
"""

from __future__ import annotations

from array import array
from typing import Union

from pydantic import BaseModel, Field, model_validator

from modkit.arith import field
from modkit.arith.modint import ModInt, Modulus
from modkit.config import MAX_MODULUS


class TableParams(BaseModel):
    """Construction parameters of a ``CombinatorialTable``."""

    bound: int = Field(ge=0)
    modulus: int = Field(ge=2, lt=MAX_MODULUS)

    @model_validator(mode="after")
    def check_bound_below_modulus(self) -> "TableParams":
        # N! would contain the factor M and have no inverse.
        if self.bound >= self.modulus:
            raise ValueError(
                f"bound must be smaller than modulus (bound={self.bound}, modulus={self.modulus})"
            )
        return self


class CombinatorialTable:
    """n!, (n!)^-1 and nCk modulo M for 0 <= k <= n <= bound."""

    def __init__(self, bound: int, modulus: Union[Modulus, int]) -> None:
        if not isinstance(modulus, Modulus):
            modulus = Modulus(modulus)
        params = TableParams(bound=bound, modulus=modulus.value)

        self._modulus = modulus
        self._bound = params.bound
        self._fac, self._facinv = _precompute(params.bound, params.modulus)

    @classmethod
    def from_params(cls, params: TableParams) -> "CombinatorialTable":
        return cls(params.bound, params.modulus)

    @property
    def bound(self) -> int:
        return self._bound

    @property
    def modulus(self) -> Modulus:
        return self._modulus

    def __len__(self) -> int:
        return self._bound + 1

    def __repr__(self) -> str:
        return f"CombinatorialTable(bound={self._bound}, modulus={self._modulus.value})"

    # ---- queries ----

    def factorial(self, n: int) -> ModInt:
        """Return n! mod M."""
        self._check_index(n)
        return ModInt._unchecked(self._fac[n], self._modulus)

    def inverse_factorial(self, n: int) -> ModInt:
        """Return (n!)^-1 mod M."""
        self._check_index(n)
        return ModInt._unchecked(self._facinv[n], self._modulus)

    def choose(self, n: int, k: int) -> ModInt:
        """Return nCk mod M.  Requires 0 <= k <= n <= bound."""
        self._check_pair(n, k)
        m = self._modulus.value
        out = field.mul(self._fac[n], self._facinv[k], m)
        out = field.mul(out, self._facinv[n - k], m)
        return ModInt._unchecked(out, self._modulus)

    def permutations(self, n: int, k: int) -> ModInt:
        """Return nPk = n! / (n-k)! mod M.  Requires 0 <= k <= n <= bound."""
        self._check_pair(n, k)
        out = field.mul(self._fac[n], self._facinv[n - k], self._modulus.value)
        return ModInt._unchecked(out, self._modulus)

    def _check_index(self, n: int) -> None:
        if not 0 <= n <= self._bound:
            raise IndexError(f"n must be in [0, {self._bound}], got {n}")

    def _check_pair(self, n: int, k: int) -> None:
        if k < 0 or n < k:
            raise ValueError(f"Need 0 <= k <= n, got n={n}, k={k}")
        self._check_index(n)


def _precompute(bound: int, modulus: int) -> tuple[array, array]:
    """Build the factorial and inverse-factorial buffers."""
    fac = array("Q", [1]) * (bound + 1)
    acc = 1
    for i in range(1, bound + 1):
        acc = field.mul(acc, i, modulus)
        fac[i] = acc

    facinv = array("Q", [0]) * (bound + 1)
    acc = field.inv(fac[bound], modulus)
    facinv[bound] = acc
    for i in range(bound, 0, -1):
        acc = field.mul(acc, i, modulus)
        facinv[i - 1] = acc

    return fac, facinv
