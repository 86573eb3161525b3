"""
Prime-power factorization of unsigned 64-bit integers.

PIPELINE:
1. Strip factors of 2 with shifts
2. Miller-Rabin (prime_utils.is_prime) classifies what is left
3. Pollard's rho (factor_utils.pollard) peels non-trivial factors off the
   composite part
4. Each peeled factor is re-checked for primality; composite ones are split
   by Sieve-of-Atkin trial division when small enough, otherwise by another
   round of this pipeline
5. Multiplicities accumulate in a {prime: exponent} dict

The command-line front end (main) covers factoring, primality testing,
prime listing and GCD/LCM.
"""
import argparse
import logging
import random
import sys
import time

from factor_utils import (
    FactorizationError,
    RhoEscalationError,
    gcd,
    lcm,
    pollard,
    trial_division,
)
from prime_utils import (
    DEFAULT_TRIALS,
    U64_MAX,
    check_u64,
    is_prime,
    isqrt,
    next_prime,
    primes_up_to,
)

logger = logging.getLogger(__name__)

# Summand escalations allowed per rho search before falling back
DEFAULT_MAX_ESCALATIONS: int = 64

# Largest sieve bound built for trial division of a composite factor
TRIAL_DIVISION_LIMIT: int = 1 << 20


def _merge(into: dict[int, int], other: dict[int, int]) -> None:
    """Add the multiplicities of other into into."""
    for p, e in other.items():
        into[p] = into.get(p, 0) + e


def _split_composite(
    f: int,
    k: int,
    rng: random.Random,
    max_escalations: int | None,
) -> dict[int, int]:
    """Fully factor a composite factor returned by rho."""
    if isqrt(f) <= TRIAL_DIVISION_LIMIT:
        return trial_division(f)
    logger.debug("composite factor %d too large for trial division, recursing", f)
    return factor(f, k=k, rng=rng, max_escalations=max_escalations)


def factor(
    n: int,
    k: int = DEFAULT_TRIALS,
    rng: random.Random | None = None,
    max_escalations: int | None = DEFAULT_MAX_ESCALATIONS,
) -> dict[int, int]:
    """
    Factorize n into prime powers.

    Args:
        n: Integer in [0, 2**64)
        k: Miller-Rabin trials per primality check
        rng: Random source for the primality checks (fresh one if omitted)
        max_escalations: Cap on rho summand escalations; None for no cap

    Returns:
        {prime: multiplicity} whose product of prime**multiplicity is n;
        empty for n <= 1

    Raises:
        FactorizationError: rho gave up on a cofactor too large for trial
            division
    """
    n = check_u64("n", n)
    factors: dict[int, int] = {}

    if n <= 1:
        return factors
    if n <= 3:
        factors[n] = 1
        return factors

    if rng is None:
        rng = random.Random()

    # Miller-Rabin needs odd n
    twos: int = 0
    while (n & 1) == 0:  # Faster than n % 2 == 0
        n >>= 1  # Faster than n //= 2
        twos += 1
    if twos:
        factors[2] = twos

    if n == 1:
        return factors
    if is_prime(n, k, rng):
        factors[n] = 1
        return factors

    while n > 1 and not is_prime(n, k, rng):
        try:
            f = pollard(n, 1, max_escalations)
        except RhoEscalationError as exc:
            if isqrt(n) > TRIAL_DIVISION_LIMIT:
                raise FactorizationError(f"unable to factor {n}: {exc}") from exc
            logger.debug("rho gave up on %d, falling back to trial division", n)
            _merge(factors, trial_division(n))
            return factors

        # rho guarantees a non-trivial factor, not a prime one
        if is_prime(f, k, rng):
            factors[f] = factors.get(f, 0) + 1
        else:
            _merge(factors, _split_composite(f, k, rng, max_escalations))

        n //= f

    if n != 1:
        factors[n] = factors.get(n, 0) + 1

    return factors


def factor_list(n: int, **kwargs) -> list[int]:
    """Prime factors of n in ascending order, repeated by multiplicity."""
    return [p for p, e in sorted(factor(n, **kwargs).items()) for _ in range(e)]


def reconstruct(factors: dict[int, int]) -> int:
    """Multiply a factorization back together."""
    product: int = 1
    for p, e in factors.items():
        product *= p ** e
    return product


def format_factorization(n: int, factors: dict[int, int]) -> str:
    """
    Render a factorization for display.

    >>> format_factorization(360, {5: 1, 2: 3, 3: 2})
    'Factors of 360: 2^3, 3^2, 5'
    """
    if not factors:
        return f"Factors of {n}: N/A"
    parts = [str(p) if e == 1 else f"{p}^{e}" for p, e in sorted(factors.items())]
    return f"Factors of {n}: " + ", ".join(parts)


# ============================================================================
# COMMAND LINE
# ============================================================================

def _u64(text: str) -> int:
    """argparse type for a decimal unsigned 64-bit integer."""
    try:
        value = int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a decimal integer: {text!r}") from None
    if value < 0 or value > U64_MAX:
        raise argparse.ArgumentTypeError(f"must be no larger than 2^64 - 1 and not negative: {text}")
    return value


def _trials(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="factor-toolkit",
        description="Factorization and prime utilities for unsigned 64-bit integers.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_factor = sub.add_parser("factor", help="Compute the prime factorization of n")
    p_factor.add_argument("n", type=_u64, help="Must be no larger than 2^64 - 1")
    p_factor.add_argument("-k", "--trials", type=_trials, default=DEFAULT_TRIALS,
                          help="Miller-Rabin trials per primality check (default: %(default)s)")
    p_factor.add_argument("--seed", type=int, default=None, help="Seed for the random source")

    p_prime = sub.add_parser("isprime", help="Test n for primality and find the next prime")
    p_prime.add_argument("n", type=_u64)
    p_prime.add_argument("-k", "--trials", type=_trials, default=DEFAULT_TRIALS)
    p_prime.add_argument("--seed", type=int, default=None)

    p_primes = sub.add_parser("primes", help="Write all primes up to n to a file")
    p_primes.add_argument("n", type=_u64, help="Bound for the sieve")
    p_primes.add_argument("-o", "--output", default="primes.txt", help="Output file (default: %(default)s)")

    p_gcd = sub.add_parser("gcd", help="Compute GCD and LCM of a and b")
    p_gcd.add_argument("a", type=_u64)
    p_gcd.add_argument("b", type=_u64)

    return parser


def _cmd_factor(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    print("Processing... ", end="")
    start = time.perf_counter()
    factors = factor(args.n, k=args.trials, rng=rng)
    elapsed = time.perf_counter() - start
    print(f"Done. Factorization took {elapsed:.6f} seconds.\n")
    print(format_factorization(args.n, factors))


def _cmd_isprime(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    verdict = "is probably prime" if is_prime(args.n, args.trials, rng) else "is not prime"
    print(f"{args.n} {verdict}")
    print(f"Next prime after {args.n}: {next_prime(args.n, args.trials, rng)}")


def _cmd_primes(args: argparse.Namespace) -> None:
    start = time.perf_counter()
    primes = primes_up_to(args.n)
    with open(args.output, "w") as fh:
        for p in primes:
            fh.write(f"{p}\n")
    elapsed = time.perf_counter() - start
    print(f"{len(primes)} primes found below {args.n} in {elapsed:.6f} seconds")


def _cmd_gcd(args: argparse.Namespace) -> None:
    start = time.perf_counter()
    g = gcd(args.a, args.b)
    time_gcd = time.perf_counter() - start

    start = time.perf_counter()
    m = lcm(args.a, args.b)
    time_lcm = time.perf_counter() - start

    print(f"gcd({args.a}, {args.b}) = {g} (process took {time_gcd:.6f} seconds)")
    print(f"lcm({args.a}, {args.b}) = {m} (process took {time_lcm:.6f} seconds)")


_COMMANDS = {
    "factor": _cmd_factor,
    "isprime": _cmd_isprime,
    "primes": _cmd_primes,
    "gcd": _cmd_gcd,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        _COMMANDS[args.command](args)
    except (ValueError, FactorizationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
