"""
Factor extraction for unsigned 64-bit integers.

1. Binary GCD (and LCM on top of it)
2. Pollard's rho with Floyd's cycle detection
3. Trial division backed by the Sieve of Atkin
"""
import logging

import numpy as np

from prime_utils import check_u64, isqrt, mod_add, mod_mult, sieve_of_atkin
from simd_operations import divisible_primes

logger = logging.getLogger(__name__)


class FactorizationError(Exception):
    """Base error for the factorization toolkit."""


class RhoEscalationError(FactorizationError):
    """Pollard's rho exhausted its allowed summand escalations."""

    def __init__(self, n: int, escalations: int):
        self.n = n
        self.escalations = escalations
        super().__init__(
            f"Pollard's rho found no non-trivial factor of {n} after {escalations} escalations"
        )


def _binary_gcd(a: int, b: int) -> int:
    if a == b:
        return a
    if a == 0:
        return b
    if b == 0:
        return a

    # Factors of 2
    if (a & 1) == 0:
        if b & 1:
            return _binary_gcd(a >> 1, b)
        return _binary_gcd(a >> 1, b >> 1) << 1

    if (b & 1) == 0:
        return _binary_gcd(a, b >> 1)

    if a > b:
        return _binary_gcd((a - b) >> 1, b)
    return _binary_gcd((b - a) >> 1, a)


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor by the binary GCD algorithm.

    Only shifts and subtraction are used; each recursive step strictly
    shrinks max(a, b), so the depth is bounded by about 128 for 64-bit input.
    """
    return _binary_gcd(check_u64("a", a), check_u64("b", b))


def lcm(a: int, b: int) -> int:
    """Least common multiple; lcm(0, b) == lcm(a, 0) == 0."""
    a = check_u64("a", a)
    b = check_u64("b", b)
    if a == 0 or b == 0:
        return 0
    # Divide first to keep the intermediate small
    return (a // _binary_gcd(a, b)) * b


def pollard(n: int, c: int = 1, max_escalations: int | None = None) -> int:
    """
    Pollard's rho algorithm with Floyd's cycle detection.

    Iterates x -> (x² + c) mod n with a tortoise moving one step and a hare
    moving two steps per round, until gcd(|tortoise - hare|, n) != 1. When
    that gcd is n itself the cycle collapsed without splitting n, and the
    search restarts with c + 1.

    Args:
        n: Odd composite number
        c: Initial constant summand
        max_escalations: How many times c may be incremented before giving
            up; None means no limit

    Returns:
        A non-trivial factor of n (neither 1 nor n); not necessarily prime

    Raises:
        RhoEscalationError: max_escalations was exceeded
    """
    if n < 4:
        raise ValueError(f"Pollard's rho needs a composite n, got {n}")

    escalations: int = 0
    while True:
        tortoise: int = 2
        hare: int = 2
        d: int = 1

        while d == 1:
            tortoise = mod_add(mod_mult(tortoise, tortoise, n), c, n)
            hare = mod_add(mod_mult(hare, hare, n), c, n)
            hare = mod_add(mod_mult(hare, hare, n), c, n)
            d = _binary_gcd(tortoise - hare if tortoise > hare else hare - tortoise, n)

        if d != n:
            return d

        if max_escalations is not None and escalations >= max_escalations:
            raise RhoEscalationError(n, escalations)
        escalations += 1
        logger.debug("rho collapsed for n=%d with c=%d, retrying with c=%d", n, c, c + 1)
        c += 1


def trial_division(n: int) -> dict[int, int]:
    """
    Factor n completely by trial division over a Sieve of Atkin.

    Candidate primes run up to isqrt(n); scanning stops once the square of
    the current prime exceeds what is left of n. Whatever remains above 1
    after the scan is itself prime.

    Args:
        n: Number to factor

    Returns:
        {prime: multiplicity}; empty for n < 2
    """
    n = check_u64("n", n)
    factors: dict[int, int] = {}
    if n < 2:
        return factors

    table = sieve_of_atkin(isqrt(n))
    candidates = np.flatnonzero(table)

    for p in divisible_primes(n, candidates):
        p = int(p)
        if p * p > n:
            break
        while n % p == 0:
            factors[p] = factors.get(p, 0) + 1
            n //= p

    if n > 1:
        factors[n] = factors.get(n, 0) + 1

    return factors
