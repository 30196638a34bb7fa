"""Numbers for the pounce language. Arithmetic words go through decimal arithmetic so that numbers typed as decimals
behave like decimals: 0.1 0.2 + is 0.3, not 0.30000000000000004. Results are handed back as plain ints/floats.

Also home to the seedable random number generator behind the seedrandom and random words.
"""

import math
import random
from decimal import ROUND_HALF_UP, Context, Decimal

CONTEXT = Context(prec=34, traps=[])  # no traps: inf - inf is NaN, as with floats
MAX_EXACT = 2 ** 53                   # larger integral results stay floats


def decimal(num):
    """Decimal of num's shortest repr, e.g. 0.1 -> Decimal('0.1') rather than the exact binary value."""
    if isinstance(num, int):
        return Decimal(num)
    return Decimal(repr(num))


def number(dec):
    """Back from Decimal to int (if integral and exactly representable) or float."""
    if dec.is_nan() or dec.is_infinite():
        return float(dec)
    if dec == dec.to_integral_value() and abs(dec) <= MAX_EXACT:
        return int(dec)
    return float(dec)


def plus(a, b):
    return number(CONTEXT.add(decimal(a), decimal(b)))


def minus(a, b):
    return number(CONTEXT.subtract(decimal(a), decimal(b)))


def times(a, b):
    return number(CONTEXT.multiply(decimal(a), decimal(b)))


def divide(a, b):
    """Callers must rule out b == 0."""
    return number(CONTEXT.divide(decimal(a), decimal(b)))


def round_to(num, places):
    """Rounds num to places decimal places, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if not math.isfinite(num):
        return num
    exponent = Decimal(1).scaleb(-int(places))
    return number(decimal(num).quantize(exponent, rounding=ROUND_HALF_UP, context=CONTEXT))


def remainder(a, b):
    """Remainder with the sign of the dividend. Callers must rule out b == 0."""
    result = CONTEXT.remainder(decimal(a), decimal(b))
    if result.is_nan() and math.isfinite(a) and math.isfinite(b):
        return math.fmod(a, b)  # quotient has more digits than CONTEXT.prec
    return number(result)


def int32(num):
    """num truncated and wrapped to a signed 32 bit integer, as bitwise words see their operands."""
    if not math.isfinite(num):
        return 0
    value = int(num) & 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


class SeededRandom:
    """Seedable pseudo-random floats in [0, 1). Unseeded generators are seeded from system entropy."""

    def __init__(self, seed=None):
        self._random = random.Random(seed)

    def seed(self, seed):
        """seed may be an int, a float or a str; equal seeds give equal sequences."""
        if isinstance(seed, float) and seed.is_integer():
            seed = int(seed)
        elif isinstance(seed, float):
            seed = repr(seed)
        self._random.seed(seed)

    def next(self):
        return self._random.random()
