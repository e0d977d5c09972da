#!/usr/bin/env python3
"""Answer binomial-coefficient queries from standard input.

Usage:
    python -m modkit.demo.run_choose [--modulus M] < input.txt

Input format::

    N Q
    n_1 k_1
    ...
    n_Q k_Q

One table of bound N is built, then ``n_i choose k_i mod M`` is written
per line.
"""

from __future__ import annotations

import argparse
import sys
from typing import IO

from modkit.combinatorics.table import CombinatorialTable
from modkit.config import DEFAULT_MODULUS
from modkit.io.scanner import Scanner


def solve(sc: Scanner, out: IO[str], modulus: int = DEFAULT_MODULUS) -> None:
    bound, queries = sc.read(int), sc.read(int)
    table = CombinatorialTable(bound, modulus)
    for _ in range(queries):
        n, k = sc.read(int), sc.read(int)
        out.write(f"{table.choose(n, k)}\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Answer binomial-coefficient queries from standard input.")
    parser.add_argument("--modulus", type=int, default=DEFAULT_MODULUS)
    args = parser.parse_args(argv)

    solve(Scanner(sys.stdin.buffer), sys.stdout, args.modulus)
    sys.stdout.flush()


if __name__ == "__main__":
    main()
