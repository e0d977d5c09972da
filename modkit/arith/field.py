"""Residue arithmetic Z/mZ on plain Python ints.

Every function takes the modulus explicitly.  Operands of ``add``,
``sub``, ``mul``, ``neg``, ``inv`` and ``div`` must already be reduced
into ``[0, modulus)``; use ``reduce`` for raw integers.
"""

from __future__ import annotations


class NotInvertibleError(ArithmeticError):
    """Raised when a residue shares a factor with the modulus."""

    def __init__(self, value: int, modulus: int, gcd: int) -> None:
        super().__init__(
            f"{value} is not invertible modulo {modulus} (gcd={gcd})"
        )
        self.value = value
        self.modulus = modulus
        self.gcd = gcd


def reduce(a: int, modulus: int) -> int:
    """Reduce an integer into [0, modulus)."""
    if 0 <= a < modulus:
        return a
    return a % modulus


def add(a: int, b: int, modulus: int) -> int:
    """Residue addition.  a + b < 2*modulus, so one subtraction suffices."""
    out = a + b
    if out >= modulus:
        out -= modulus
    return out


def sub(a: int, b: int, modulus: int) -> int:
    """Residue subtraction."""
    if a < b:
        return (modulus + a) - b
    return a - b


def mul(a: int, b: int, modulus: int) -> int:
    """Residue multiplication.

    The product of two residues can need twice the modulus' bit width;
    Python ints widen automatically so it is reduced exactly.
    """
    return (a * b) % modulus


def neg(a: int, modulus: int) -> int:
    """Additive inverse."""
    return modulus - a if a else 0


def inv(a: int, modulus: int) -> int:
    """Multiplicative inverse via the extended Euclidean algorithm.

    Tracks ``r_i ≡ x_i * a (mod modulus)`` for two remainders at a time,
    with the coefficients ``x_i`` kept as residues.
    """
    if a == 0:
        raise ZeroDivisionError(f"Cannot invert zero modulo {modulus}")

    r0, x0 = a, 1
    r1, x1 = modulus, 0
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        x0, x1 = x1, sub(x0, mul(reduce(q, modulus), x1, modulus), modulus)

    if r0 != 1:
        raise NotInvertibleError(a, modulus, r0)
    return x0


def div(a: int, b: int, modulus: int) -> int:
    """Residue division a / b."""
    return mul(a, inv(b, modulus), modulus)


def power(base: int, exponent: int, modulus: int) -> int:
    """base ** exponent by repeated squaring.

    The exponent may be arbitrarily large; it is not reduced modulo
    ``modulus - 1``.
    """
    if exponent < 0:
        raise ValueError(f"Exponent must be non-negative, got {exponent}")
    acc = reduce(1, modulus)
    while exponent > 0:
        if exponent & 1:
            acc = mul(acc, base, modulus)
        exponent >>= 1
        base = mul(base, base, modulus)
    return acc
