"""Modular integer values bound to a modulus family.

A ``Modulus`` fixes ``M`` once and produces ``ModInt`` values::

    MOD = Modulus(13)
    MOD(5) == MOD(2) - MOD(10)

Each value carries its family, and combining values of two different
families raises ``ModulusMismatchError``.  Plain ints are accepted as
operands and reduced into the family of the ``ModInt`` they meet.
"""

from __future__ import annotations

from typing import Union

from modkit.arith import field
from modkit.config import MAX_MODULUS, MOD1000000007_VALUE, MOD998244353_VALUE


class ModulusMismatchError(ValueError):
    """Raised when values of different moduli are combined."""


class Modulus:
    """A modulus ``M`` with ``1 <= M < 2**64``; calling it builds values."""

    __slots__ = ("_value",)

    def __init__(self, value: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Modulus must be an int, got {type(value).__name__}")
        if not 1 <= value < MAX_MODULUS:
            raise ValueError(f"Modulus must be in [1, 2**64), got {value}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __call__(self, raw: int) -> "ModInt":
        return ModInt(raw, self)

    def zero(self) -> "ModInt":
        return ModInt._unchecked(0, self)

    def one(self) -> "ModInt":
        return ModInt._unchecked(field.reduce(1, self._value), self)

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Modulus):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("Modulus", self._value))

    def __repr__(self) -> str:
        return f"Modulus({self._value})"


class ModInt:
    """Immutable residue in ``[0, M)``."""

    __slots__ = ("_value", "_modulus")

    def __init__(self, raw: int, modulus: Union[Modulus, int]) -> None:
        if not isinstance(raw, int):
            raise TypeError(f"ModInt needs an int, got {type(raw).__name__}")
        if not isinstance(modulus, Modulus):
            modulus = Modulus(modulus)
        self._modulus = modulus
        self._value = field.reduce(raw, modulus.value)

    @classmethod
    def _unchecked(cls, value: int, modulus: Modulus) -> "ModInt":
        """Wrap an already reduced residue."""
        obj = cls.__new__(cls)
        obj._value = value
        obj._modulus = modulus
        return obj

    # ---- accessors ----

    @property
    def value(self) -> int:
        return self._value

    @property
    def modulus(self) -> Modulus:
        return self._modulus

    def _coerce(self, other: object) -> int | None:
        """Return *other* as a residue of this family, or None if foreign."""
        if isinstance(other, ModInt):
            if other._modulus is not self._modulus and other._modulus != self._modulus:
                raise ModulusMismatchError(
                    f"Cannot combine values modulo {self._modulus.value} "
                    f"and {other._modulus.value}"
                )
            return other._value
        if isinstance(other, int):
            return field.reduce(other, self._modulus.value)
        return None

    # ---- arithmetic ----

    def __add__(self, other: object) -> "ModInt":
        b = self._coerce(other)
        if b is None:
            return NotImplemented
        m = self._modulus
        return ModInt._unchecked(field.add(self._value, b, m.value), m)

    __radd__ = __add__

    def __sub__(self, other: object) -> "ModInt":
        b = self._coerce(other)
        if b is None:
            return NotImplemented
        m = self._modulus
        return ModInt._unchecked(field.sub(self._value, b, m.value), m)

    def __rsub__(self, other: object) -> "ModInt":
        a = self._coerce(other)
        if a is None:
            return NotImplemented
        m = self._modulus
        return ModInt._unchecked(field.sub(a, self._value, m.value), m)

    def __mul__(self, other: object) -> "ModInt":
        b = self._coerce(other)
        if b is None:
            return NotImplemented
        m = self._modulus
        return ModInt._unchecked(field.mul(self._value, b, m.value), m)

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> "ModInt":
        b = self._coerce(other)
        if b is None:
            return NotImplemented
        m = self._modulus
        return ModInt._unchecked(field.div(self._value, b, m.value), m)

    def __rtruediv__(self, other: object) -> "ModInt":
        a = self._coerce(other)
        if a is None:
            return NotImplemented
        m = self._modulus
        return ModInt._unchecked(field.div(a, self._value, m.value), m)

    def __neg__(self) -> "ModInt":
        m = self._modulus
        return ModInt._unchecked(field.neg(self._value, m.value), m)

    def __pos__(self) -> "ModInt":
        return self

    def __pow__(self, exponent: int) -> "ModInt":
        if not isinstance(exponent, int):
            return NotImplemented
        return self.pow(exponent)

    def inverse(self) -> "ModInt":
        """Multiplicative inverse (extended Euclid).

        Raises ``ZeroDivisionError`` for the zero residue and
        ``field.NotInvertibleError`` when the value and the modulus are
        not coprime.
        """
        m = self._modulus
        return ModInt._unchecked(field.inv(self._value, m.value), m)

    def pow(self, exponent: int) -> "ModInt":
        """Raise to a non-negative integer power by repeated squaring."""
        m = self._modulus
        return ModInt._unchecked(field.power(self._value, exponent, m.value), m)

    # ---- comparison / conversion ----

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ModInt):
            return self._modulus == other._modulus and self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return self._value != 0

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"ModInt({self._value}, modulus={self._modulus.value})"

    def __str__(self) -> str:
        return str(self._value)


MOD998244353 = Modulus(MOD998244353_VALUE)
MOD1000000007 = Modulus(MOD1000000007_VALUE)
