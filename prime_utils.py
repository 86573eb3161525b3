"""
Prime utilities for unsigned 64-bit integers.

Contents:
1. Numeric primitives: integer square root, modular addition,
   multiplication and exponentiation written so no intermediate value
   needs more than a 64-bit word
2. Miller-Rabin probabilistic primality test, repeated k times
3. Sieve of Atkin, plus a prime listing built on top of it

Every randomized function takes an explicit random.Random instance. When
none is given a fresh generator is seeded from OS entropy for that call, so
no generator state is shared between calls or threads.
"""
import logging
import random

import numpy as np

from simd_operations import _atkin_toggle_simd, _square_free_filter_simd

logger = logging.getLogger(__name__)

U64_MAX: int = (1 << 64) - 1

# Miller-Rabin rounds; a composite survives all of them with probability <= 4^-30
DEFAULT_TRIALS: int = 30

# Operands below this bound multiply without leaving a 64-bit word
_HALF_WORD: int = 1 << 32


def check_u64(name: str, value: int) -> int:
    """
    Validate that value lies in the unsigned 64-bit domain.

    Raises:
        TypeError: value is not an int (bools are rejected too)
        ValueError: value is negative or larger than 2**64 - 1
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    value = int(value)
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} must be in [0, 2**64 - 1], got {value}")
    return value


def isqrt(n: int) -> int:
    """Return floor(sqrt(n)) exactly, without floating point."""
    if n < 2:
        return n

    # 2 * isqrt(n / 4) is within one of the answer
    small: int = isqrt(n >> 2) << 1
    large: int = small + 1
    return small if large * large > n else large


def mod_add(a: int, b: int, n: int) -> int:
    """
    (a + b) mod n.

    Both terms are reduced first; the sum is then reduced by a conditional
    subtraction, so a + b is only formed when it is already below n.
    """
    a %= n
    b %= n
    if a >= n - b:
        return a - (n - b)
    return a + b


def mod_mult(a: int, b: int, n: int) -> int:
    """
    (a * b) mod n by double-and-add.

    Args:
        a: Multiplicand
        b: Multiplier
        n: Modulus

    Returns:
        The product reduced mod n (always < n)
    """
    a %= n
    b %= n
    if a < _HALF_WORD and b < _HALF_WORD:
        return (a * b) % n

    r: int = 0
    while b > 0:
        if b & 1:
            r = mod_add(r, a, n)
        a = mod_add(a, a, n)
        b >>= 1
    return r


def mod_pow(a: int, b: int, n: int) -> int:
    """(a ** b) mod n by square-and-multiply, each step through mod_mult."""
    r: int = 1 % n
    a %= n
    while b > 0:
        if b & 1:
            r = mod_mult(r, a, n)
        a = mod_mult(a, a, n)
        b >>= 1
    return r


def miller_rabin(n: int, d: int, rng: random.Random) -> bool:
    """
    Run a single Miller-Rabin trial.

    Args:
        n: Odd number to test, n > 3
        d: Odd part of n - 1 (n - 1 = d * 2^r)
        rng: Source for the witness

    Returns:
        False if the drawn witness proves n composite, True otherwise
    """
    a: int = rng.randint(2, n - 2)
    x: int = mod_pow(a, d, n)

    if x == 1 or x == n - 1:
        return True

    # At most r - 1 squarings: stop once x = a^((n-1)/2) has been checked
    half: int = (n - 1) >> 1
    while d != half:
        x = mod_mult(x, x, n)
        d <<= 1

        if x == 1:
            return False
        if x == n - 1:
            return True

    return False


def is_prime(n: int, k: int = DEFAULT_TRIALS, rng: random.Random | None = None) -> bool:
    """
    Miller-Rabin primality test repeated k times.

    A True result means n passed k independent randomized trials, not that
    it is proven prime. False is always correct.

    Args:
        n: Number to test
        k: Number of trials
        rng: Random source for witness selection (fresh one if omitted)

    Returns:
        Whether n is probably prime
    """
    n = check_u64("n", n)
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")

    if n <= 1:
        return False
    if n <= 3:
        return True
    if (n & 1) == 0:
        return False

    # n - 1 = d * 2^r with d odd
    d: int = n - 1
    while (d & 1) == 0:
        d >>= 1

    if rng is None:
        rng = random.Random()

    for _ in range(k):
        if not miller_rabin(n, d, rng):
            return False
    return True


def next_prime(n: int, k: int = DEFAULT_TRIALS, rng: random.Random | None = None) -> int:
    """Smallest probable prime strictly greater than n."""
    n = check_u64("n", n)
    if n < 2:
        return 2

    if rng is None:
        rng = random.Random()

    candidate: int = n + 1 if (n & 1) == 0 else n + 2
    while candidate <= U64_MAX:
        if is_prime(candidate, k, rng):
            return candidate
        candidate += 2
    raise ValueError(f"no prime above {n} fits in 64 bits")


def sieve_of_atkin(n: int) -> np.ndarray:
    """
    Sieve of Atkin up to and including n.

    Args:
        n: Upper bound for the sieve

    Returns:
        Boolean array of length n + 1 where entry i is True iff i is prime
    """
    n = check_u64("n", n)
    table = np.zeros(n + 1, dtype=bool)
    # Slicing keeps the seeds in bounds for n < 3
    table[2:4] = True

    lim = isqrt(n)
    logger.debug("Sieve of Atkin: bound=%d, lim=%d", n, lim)
    _atkin_toggle_simd(table, lim)
    _square_free_filter_simd(table, lim)
    return table


def primes_up_to(n: int) -> np.ndarray:
    """All primes <= n in ascending order."""
    return np.flatnonzero(sieve_of_atkin(n))
