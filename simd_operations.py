"""
Vectorized kernels for the factorization toolkit.

This module holds the NumPy code paths used by the sieve and by trial
division. The public functions in prime_utils and factor_utils keep the
scalar control flow; the inner loops that touch every (x, y) pair or every
candidate prime live here.

OPTIMIZATION TARGETS:
1. Sieve of Atkin: quadratic-form toggles evaluated over whole rows of
   (x, y) pairs, parity computed with np.unique instead of a Python loop
2. Square-free filter: slice assignment per surviving j (like the
   Eratosthenes marking in the trial division sieve)
3. Trial division: one vectorized remainder over all candidate primes to
   find the ones that divide n
"""

import numpy as np

# Upper bound on (x, y) pairs materialized at once by the Atkin kernel.
MAX_PAIR_BATCH: int = 1 << 20


def _toggle_odd(table: np.ndarray, k: np.ndarray) -> None:
    """XOR-flip table[i] once for every index i occurring an odd number of times in k."""
    if k.size == 0:
        return
    values, counts = np.unique(k, return_counts=True)
    flips = values[(counts & 1) == 1]
    table[flips] ^= True


def _atkin_toggle_simd(table: np.ndarray, lim: int) -> None:
    """
    Apply the three quadratic-form toggles of the Sieve of Atkin in place.

    For every x, y in [1, lim]:
        k = 4x² + y²   toggled when k mod 12 in {1, 5}
        k = 3x² + y²   toggled when k mod 12 == 7
        k = 3x² - y²   toggled when x > y and k mod 12 == 11
    Only indices k <= len(table) - 1 are touched. Flipping an entry an even
    number of times leaves it unchanged, so each batch contributes only the
    indices that occur an odd number of times.

    Args:
        table: Boolean array of length n + 1, modified in place
        lim: isqrt(n)
    """
    if lim < 1:
        return

    n = len(table) - 1
    y = np.arange(1, lim + 1, dtype=np.int64)
    y2 = y * y
    rows_per_batch = max(1, MAX_PAIR_BATCH // lim)

    for start in range(1, lim + 1, rows_per_batch):
        x = np.arange(start, min(start + rows_per_batch, lim + 1), dtype=np.int64)
        x2 = (x * x)[:, None]

        k = 4 * x2 + y2
        mod = k % 12
        _toggle_odd(table, k[(k <= n) & ((mod == 1) | (mod == 5))])

        k = 3 * x2 + y2
        _toggle_odd(table, k[(k <= n) & (k % 12 == 7)])

        k = 3 * x2 - y2
        # x > y also keeps k positive
        above = x[:, None] > y[None, :]
        _toggle_odd(table, k[above & (k <= n) & (k % 12 == 11)])


def _square_free_filter_simd(table: np.ndarray, lim: int) -> None:
    """Clear every multiple of j² for each j in [5, lim] still marked prime."""
    for j in range(5, lim + 1):
        if table[j]:
            step = j * j
            table[step::step] = False


def divisible_primes(n: int, primes: np.ndarray) -> np.ndarray:
    """
    Return the entries of `primes` that divide n, in ascending order.

    The remainder is taken in uint64 so any n in [0, 2**64) is exact.

    Args:
        n: Number under test
        primes: Ascending array of candidate primes

    Returns:
        Array (uint64) of the primes p with n % p == 0
    """
    candidates = np.asarray(primes, dtype=np.uint64)
    if candidates.size == 0:
        return candidates
    remainders = np.uint64(n) % candidates
    return candidates[remainders == 0]
