"""
Benchmark suite for the factorization toolkit.

Benchmarks:
1. Modular Arithmetic: mod_mult / mod_pow on word-sized and 64-bit operands
2. Primality Testing: Miller-Rabin with k = 30
3. Sieve of Atkin: table construction for growing bounds
4. Trial Division: sieve-backed complete factorization
5. Pollard Rho: single factor extraction from semiprimes
6. Complete Factorization: the full pipeline across magnitudes
"""

import random
import statistics
import sys
import time
from typing import Callable, List

from factor_utils import pollard, trial_division
from factorization import factor, reconstruct
from prime_utils import is_prime, mod_mult, mod_pow, sieve_of_atkin


# ============================================================================
# BENCHMARK UTILITIES
# ============================================================================

class BenchmarkResult:
    """Store benchmark results with statistics."""

    def __init__(self, name: str, times: List[float], operations: int = 1):
        self.name = name
        self.times = sorted(times)
        self.operations = operations

        self.min = min(times)
        self.max = max(times)
        self.mean = statistics.mean(times)
        self.median = statistics.median(times)
        self.stdev = statistics.stdev(times) if len(times) > 1 else 0

    def __str__(self):
        return (f"{self.name:40} | "
                f"Mean: {self.mean*1000:8.3f}ms | "
                f"Median: {self.median*1000:8.3f}ms | "
                f"StdDev: {self.stdev*1000:8.3f}ms | "
                f"Min: {self.min*1000:8.3f}ms | "
                f"Max: {self.max*1000:8.3f}ms")


def benchmark(func: Callable, *args, iterations: int = 5, **kwargs) -> BenchmarkResult:
    """
    Benchmark a function and return statistics.

    Args:
        func: Function to benchmark
        *args: Positional arguments to function
        iterations: Number of iterations to run
        **kwargs: Keyword arguments to function

    Returns:
        BenchmarkResult with timing statistics
    """
    times = []

    # Warm up
    func(*args, **kwargs)

    for _ in range(iterations):
        start = time.perf_counter()
        func(*args, **kwargs)
        times.append(time.perf_counter() - start)

    return BenchmarkResult(func.__name__, times)


def _section(title: str) -> None:
    print("\n" + "=" * 100)
    print(title)
    print("=" * 100)


# ============================================================================
# 1. MODULAR ARITHMETIC BENCHMARKS
# ============================================================================

def benchmark_modular_arithmetic():
    """Compare the direct-product path with the double-and-add path."""
    _section("MODULAR ARITHMETIC BENCHMARKS")

    cases = [
        ((12345, 67890, 1000000007), "mod_mult, 32-bit operands"),
        (((1 << 63) + 12345, (1 << 62) + 999, (1 << 64) - 59), "mod_mult, 64-bit operands"),
    ]
    for args, description in cases:
        result = benchmark(mod_mult, *args, iterations=50)
        result.name = description
        print(result)

    result = benchmark(mod_pow, 3, (1 << 64) - 60, (1 << 64) - 59, iterations=5)
    result.name = "mod_pow, 64-bit exponent"
    print(result)


# ============================================================================
# 2. PRIMALITY TESTING BENCHMARKS
# ============================================================================

def benchmark_primality():
    """Benchmark Miller-Rabin primality testing."""
    _section("PRIMALITY TESTING BENCHMARKS")

    test_primes = [
        (104729, "Small prime (6 digits)"),
        (15485863, "Medium prime (8 digits)"),
        (2147483647, "Mersenne prime 2^31 - 1"),
        ((1 << 61) - 1, "Mersenne prime 2^61 - 1"),
        ((1 << 64) - 59, "Largest 64-bit prime"),
    ]

    rng = random.Random(0)
    for prime, description in test_primes:
        result = benchmark(is_prime, prime, rng=rng, iterations=5)
        result.name = description
        print(result)


# ============================================================================
# 3. SIEVE BENCHMARKS
# ============================================================================

def benchmark_sieve():
    """Benchmark Sieve of Atkin construction."""
    _section("SIEVE OF ATKIN BENCHMARKS")

    for bound in (10**4, 10**5, 10**6, 10**7):
        result = benchmark(sieve_of_atkin, bound, iterations=3)
        result.name = f"Sieve up to {bound:,}"
        print(result)


# ============================================================================
# 4. TRIAL DIVISION BENCHMARKS
# ============================================================================

def benchmark_trial_division():
    """Benchmark sieve-backed trial division."""
    _section("TRIAL DIVISION BENCHMARKS")

    test_cases = [
        (360, "Small composite (360)"),
        (30030, "Product of primes (2*3*5*7*11*13)"),
        (1234567, "Medium number (127 * 9721)"),
        (999983 * 999979, "Semiprime near 10^12"),
    ]

    for n, description in test_cases:
        result = benchmark(trial_division, n, iterations=5)
        result.name = description
        print(result)


# ============================================================================
# 5. POLLARD RHO BENCHMARKS
# ============================================================================

def benchmark_pollard_rho():
    """Benchmark a single rho extraction."""
    _section("POLLARD RHO BENCHMARKS")

    test_cases = [
        (10403, "101 * 103"),
        (1000003 * 1000033, "Semiprime near 10^12"),
        (1000000007 * 1000000009, "Semiprime near 10^18"),
    ]

    for n, description in test_cases:
        result = benchmark(pollard, n, iterations=3)
        result.name = description
        print(result)


# ============================================================================
# 6. COMPLETE FACTORIZATION BENCHMARKS
# ============================================================================

def benchmark_complete_factorization():
    """Benchmark the full pipeline and verify each result."""
    _section("COMPLETE FACTORIZATION BENCHMARKS")

    rng = random.Random(42)
    test_cases = [
        (360, "Small composite"),
        (2**61, "Power of two"),
        (123456789101112, "15-digit composite"),
        (1000003 * 1000033, "Semiprime near 10^12"),
        ((1 << 64) - 1, "2^64 - 1"),
    ]

    for n, description in test_cases:
        result = benchmark(factor, n, rng=rng, iterations=3)
        result.name = description
        print(result)
        if reconstruct(factor(n, rng=rng)) != n:
            print(f"  !! factorization of {n} does not multiply back")


# ============================================================================
# MAIN BENCHMARK SUITE
# ============================================================================

def run_all_benchmarks():
    """Run all benchmarks."""
    print("\n")
    print("╔" + "=" * 98 + "╗")
    print("║" + " " * 20 + "FACTORIZATION TOOLKIT BENCHMARK SUITE" + " " * 41 + "║")
    print("╚" + "=" * 98 + "╝")

    try:
        benchmark_modular_arithmetic()
        benchmark_primality()
        benchmark_sieve()
        benchmark_trial_division()
        benchmark_pollard_rho()
        benchmark_complete_factorization()

        print("\n" + "=" * 100)
        print("BENCHMARK COMPLETE")
        print("=" * 100 + "\n")

    except KeyboardInterrupt:
        print("\nBenchmark interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    run_all_benchmarks()
