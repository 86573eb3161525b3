import math
import random
import unittest

from factor_utils import (
    FactorizationError,
    RhoEscalationError,
    gcd,
    lcm,
    pollard,
    trial_division,
)
from prime_utils import U64_MAX


class TestBinaryGCD(unittest.TestCase):
    """Test the binary GCD algorithm"""

    def test_base_cases(self):
        self.assertEqual(gcd(0, 0), 0)
        self.assertEqual(gcd(0, 9), 9)
        self.assertEqual(gcd(9, 0), 9)
        self.assertEqual(gcd(7, 7), 7)

    def test_known_values(self):
        self.assertEqual(gcd(48, 18), 6)
        self.assertEqual(gcd(17, 5), 1)
        self.assertEqual(gcd(1 << 40, 1 << 12), 1 << 12)
        self.assertEqual(gcd(2 * 3 * 5 * 7, 5 * 7 * 11), 35)

    def test_matches_math_gcd(self):
        rng = random.Random(17)
        for _ in range(300):
            a = rng.randint(0, U64_MAX)
            b = rng.randint(0, U64_MAX)
            self.assertEqual(gcd(a, b), math.gcd(a, b))
        for _ in range(300):
            common = rng.randint(1, 1 << 20)
            a = common * rng.randint(0, 1 << 40)
            b = common * rng.randint(0, 1 << 40)
            self.assertEqual(gcd(a, b), math.gcd(a, b))

    def test_extremes(self):
        self.assertEqual(gcd(U64_MAX, U64_MAX - 1), 1)
        self.assertEqual(gcd(U64_MAX, 1 << 63), 1)
        self.assertEqual(gcd(U64_MAX, 6700417), 6700417)

    def test_rejects_negative(self):
        with self.assertRaises(ValueError):
            gcd(-4, 6)


class TestLCM(unittest.TestCase):

    def test_known_values(self):
        self.assertEqual(lcm(4, 6), 12)
        self.assertEqual(lcm(21, 6), 42)
        self.assertEqual(lcm(1, 97), 97)
        self.assertEqual(lcm(12, 18), 36)

    def test_zero(self):
        self.assertEqual(lcm(0, 5), 0)
        self.assertEqual(lcm(5, 0), 0)
        self.assertEqual(lcm(0, 0), 0)

    def test_matches_math_lcm(self):
        rng = random.Random(19)
        for _ in range(100):
            a = rng.randint(1, 1 << 32)
            b = rng.randint(1, 1 << 32)
            self.assertEqual(lcm(a, b), a * b // math.gcd(a, b))


class TestPollardRho(unittest.TestCase):
    """Test Pollard's rho with Floyd cycle detection"""

    def assertNonTrivialFactor(self, n, d):
        self.assertTrue(1 < d < n, f"{d} is trivial for {n}")
        self.assertEqual(n % d, 0)

    def test_semiprime(self):
        """10403 = 101 * 103"""
        self.assertIn(pollard(10403), (101, 103))

    def test_classic_example(self):
        """8051 = 83 * 97; x^2 + 1 from 2 finds 97"""
        self.assertEqual(pollard(8051), 97)

    def test_deterministic(self):
        """No randomness: same n and c give the same factor"""
        n = 1000003 * 1000033
        self.assertEqual(pollard(n), pollard(n))

    def test_medium_semiprime(self):
        n = 1000003 * 1000033
        self.assertIn(pollard(n), (1000003, 1000033))

    def test_odd_composites(self):
        for n in [9, 15, 21, 49, 91, 341, 561, 1105, 3 ** 10, 7 * 11 * 13 * 17]:
            self.assertNonTrivialFactor(n, pollard(n))

    def test_escalation(self):
        """For 25 the c = 1 sequence collapses to gcd = n; c = 2 splits it"""
        self.assertEqual(pollard(25), 5)
        self.assertEqual(pollard(25, max_escalations=1), 5)
        self.assertEqual(pollard(25, c=2, max_escalations=0), 5)

    def test_escalation_cap(self):
        with self.assertRaises(RhoEscalationError) as ctx:
            pollard(25, max_escalations=0)
        self.assertEqual(ctx.exception.n, 25)
        self.assertEqual(ctx.exception.escalations, 0)
        self.assertIsInstance(ctx.exception, FactorizationError)

    def test_rejects_tiny(self):
        with self.assertRaises(ValueError):
            pollard(3)


class TestTrialDivision(unittest.TestCase):
    """Test sieve-backed trial division"""

    def test_degenerate(self):
        self.assertEqual(trial_division(0), {})
        self.assertEqual(trial_division(1), {})

    def test_primes(self):
        self.assertEqual(trial_division(2), {2: 1})
        self.assertEqual(trial_division(3), {3: 1})
        self.assertEqual(trial_division(97), {97: 1})
        self.assertEqual(trial_division(1000003), {1000003: 1})

    def test_small_number(self):
        """360 = 2^3 * 3^2 * 5"""
        self.assertEqual(trial_division(360), {2: 3, 3: 2, 5: 1})

    def test_power_of_small_prime(self):
        self.assertEqual(trial_division(1024), {2: 10})
        self.assertEqual(trial_division(3 ** 12), {3: 12})
        self.assertEqual(trial_division(49), {7: 2})

    def test_mixed_factors(self):
        """Residual above the sieve is recorded as a prime"""
        self.assertEqual(trial_division(6000018), {2: 1, 3: 1, 1000003: 1})
        self.assertEqual(trial_division(1234567), {127: 1, 9721: 1})
        self.assertEqual(trial_division(999999), {3: 3, 7: 1, 11: 1, 13: 1, 37: 1})

    def test_product_of_small_primes(self):
        self.assertEqual(trial_division(2310), {2: 1, 3: 1, 5: 1, 7: 1, 11: 1})
        self.assertEqual(trial_division(30030), {2: 1, 3: 1, 5: 1, 7: 1, 11: 1, 13: 1})

    def test_semiprime_near_sieve_bound(self):
        self.assertEqual(trial_division(999983 * 999979), {999979: 1, 999983: 1})
        self.assertEqual(trial_division(1009 * 1009), {1009: 2})

    def test_round_trip(self):
        for n in range(2, 3000):
            product = 1
            for p, e in trial_division(n).items():
                product *= p ** e
            self.assertEqual(product, n)


if __name__ == '__main__':
    unittest.main(verbosity=2)
