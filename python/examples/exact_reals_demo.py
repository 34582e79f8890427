"""
Exact Real Arithmetic Example
=============================

This example walks through the main pieces of ExactReal:

1. Constants and arithmetic observed through a shared cache
2. Rounding reals to a number of digits, in any radix
3. Roots, logarithms and powers built on monotonic search
4. Inverting a user-defined function
5. Concurrent observation of one real from many threads

Every digit printed below is proven: each comes from a rational Segment
that provably contains the real number.

Run: python examples/exact_reals_demo.py
"""

import concurrent.futures
import logging
from fractions import Fraction

import numpy as np
import exactreal as er


def digits(x, cache, count=10):
    """Format ``x`` with ``count`` correct decimal digits (floored)."""
    return er.format_rational(
        er.floor_to_rational(x, cache, fraction_digits=count),
        er.FractionFormat.DOT,
    )


def main():
    logging.basicConfig(level=logging.WARNING)
    config = er.EvaluationConfig()
    cache = config.make_cache()
    comparator = config.make_comparator(cache)

    print("=" * 60)
    print("ExactReal Examples")
    print("=" * 60)

    # 1. Arithmetic
    print("\n[1] Constants and Arithmetic")
    print("-" * 40)
    print(f"pi       = {digits(er.PI, cache, 30)}")
    print(f"e        = {digits(er.E, cache, 30)}")
    print(f"pi * e   = {digits(er.PI * er.E, cache)}")
    print(f"pi / e   = {digits(er.PI / er.E, cache)}")
    print(f"1/3 + pi = {digits(Fraction(1, 3) + er.PI, cache)}")
    print(f"Segment of pi within 1e-6: {cache.observe_within(er.PI, Fraction(1, 10 ** 6))}")

    # 2. Rounding
    print("\n[2] Rounding")
    print("-" * 40)
    for value in (Fraction(3, 2), Fraction(-3, 2)):
        print(
            f"{value}: floor {er.floor_rational(value)}, "
            f"round {er.round_rational(value)}, "
            f"ceiling {er.ceiling_rational(value)}"
        )
    print(f"pi to 2 digits: floor {er.floor_to_rational(er.PI, cache, fraction_digits=2)}, "
          f"ceiling {er.ceiling_to_rational(er.PI, cache, fraction_digits=2)}")
    binary_pi = er.floor_to_rational(er.PI, cache, radix=2, fraction_digits=20)
    print(f"pi in binary: {er.format_rational(binary_pi, er.FractionFormat.DOT, radix=2)}")
    print(f"1/7 = {er.periodic_expansion(Fraction(1, 7)).to_string()}")

    # 3. Derived operations
    print("\n[3] Roots, Logarithms and Powers")
    print("-" * 40)
    print(f"sqrt(2)       = {digits(er.root(2, 2), cache)}")
    print(f"cbrt(-2)      = {digits(er.root(-2, 3), cache)}")
    print(f"8^(2/3)       = {er.power(8, Fraction(2, 3))}")
    print(f"ln(2)         = {digits(er.ln(2, comparator), cache, 8)}")
    print(f"log_1000(100) = {er.round_to_rational(er.log(100, 1000, comparator), cache, fraction_digits=3)}")
    print(f"exp(pi)       = {digits(er.exp(er.PI), cache, 8)}")

    # 4. Inversion
    print("\n[4] Inverting f(x) = x^3 + x")
    print("-" * 40)
    inverse = er.reverse(lambda q: q ** 3 + q, cache=cache)
    for target in (3, 5, er.PI):
        x = inverse(target)
        print(f"f(x) = {target}: x = {digits(x, cache, 8)}")
    outside = er.binary_search(1000, lambda q: q * q, er.Bounds.closed(0, 10))
    print(f"x^2 = 1000 on [0, 10]: {outside}")

    # 5. Sharing work across threads
    print("\n[5] Concurrent Observation")
    print("-" * 40)
    shared = er.SimpleEvaluationCache()
    x = er.root(er.PI, 2, er.ApproximateComparator(shared, config.comparator_delta))
    levels = [Fraction(1, 2 ** k) for k in range(10, 40)]
    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
        segments = list(executor.map(lambda d: shared.observe_within(x, d), levels))
    widths = np.array([float(s.diff) for s in segments])
    print(f"sqrt(pi) observed at {len(levels)} precisions from 8 threads")
    print(f"Narrowest Segment width: {widths.min():.3e}")
    print(f"Cache: {shared.stats()}")
    print(f"As float64: {er.to_numpy([x, er.PI, er.E], shared)}")

    print("\n" + "=" * 60)
    print("Every Segment above provably contains its real number.")
    print("=" * 60)


if __name__ == "__main__":
    main()
