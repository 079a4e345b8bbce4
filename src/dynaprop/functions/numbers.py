"""Arithmetic and bitwise functions exposed as members of numbers.

Each function takes the number it is called on as its first parameter;
``123.add "1"`` calls ``add(123, 1)``.  Integer division and remainder
truncate toward zero.
"""

from __future__ import annotations

import math
from decimal import Decimal

from ..members.catalog import member
from ..types import Byte, Int, Long, Short, p_byte, p_int, p_long, p_short


def _trunc_div(v1: int, v2: int) -> int:
    q = v1 // v2
    if q < 0 and q * v2 != v1:
        q += 1
    return q


def _sign(value) -> int:
    return (value > 0) - (value < 0)


def _narrow(value: int, ptype) -> int:
    if not ptype.in_range(value):
        raise OverflowError(f"{ptype.name} overflow: {value}")
    return value


class NumberFunctions:

    # ── int ──

    @staticmethod
    def add(v1: int, v2: int) -> int:
        return v1 + v2

    @staticmethod
    def sub(v1: int, v2: int) -> int:
        return v1 - v2

    subtract = sub

    @staticmethod
    def mul(v1: int, v2: int) -> int:
        return v1 * v2

    @staticmethod
    def div(v1: int, v2: int) -> int:
        return _trunc_div(v1, v2)

    divide = div

    @staticmethod
    def mod(v1: int, v2: int) -> int:
        return v1 - v2 * _trunc_div(v1, v2)

    @staticmethod
    def inc(v: int) -> int:
        return v + 1

    @staticmethod
    def dec(v: int) -> int:
        return v - 1

    @staticmethod
    def negate(v: int) -> int:
        return -v

    @staticmethod
    def compare(v1: int, v2: int) -> int:
        return _sign(v1 - v2)

    @staticmethod
    @member("and")
    def and_(v1: int, v2: int) -> int:
        return v1 & v2

    @staticmethod
    @member("or")
    def or_(v1: int, v2: int) -> int:
        return v1 | v2

    @staticmethod
    @member("xor")
    def xor_(v1: int, v2: int) -> int:
        return v1 ^ v2

    @staticmethod
    @member("not")
    def not_(v: int) -> int:
        return ~v

    @staticmethod
    def and_not(v1: int, v2: int) -> int:
        return v1 & ~v2

    @staticmethod
    def shift_left(v: int, count: Int) -> int:
        return v << count

    @staticmethod
    def shift_right(v: int, count: Int) -> int:
        return v >> count

    @staticmethod
    def shift_right_unsigned(v: int, count: Int) -> int:
        """Logical right shift in the narrowest of int32 and int64 holding *v*."""
        ptype = p_int if p_int.in_range(v) else p_long
        if not ptype.in_range(v):
            raise OverflowError(f"{ptype.name} overflow: {v}")
        bits = ptype.bits
        return (v & ((1 << bits) - 1)) >> (count & (bits - 1))

    @staticmethod
    def to_byte_exact(v: int) -> Byte:
        return _narrow(v, p_byte)

    @staticmethod
    def to_short_exact(v: int) -> Short:
        return _narrow(v, p_short)

    # ── float ──

    @staticmethod
    @member("add")
    def add_float(v1: float, v2: float) -> float:
        return v1 + v2

    @staticmethod
    @member("sub")
    def sub_float(v1: float, v2: float) -> float:
        return v1 - v2

    @staticmethod
    @member("subtract")
    def subtract_float(v1: float, v2: float) -> float:
        return v1 - v2

    @staticmethod
    @member("mul")
    def mul_float(v1: float, v2: float) -> float:
        return v1 * v2

    @staticmethod
    @member("div")
    def div_float(v1: float, v2: float) -> float:
        return v1 / v2

    @staticmethod
    @member("divide")
    def divide_float(v1: float, v2: float) -> float:
        return v1 / v2

    @staticmethod
    @member("mod")
    def mod_float(v1: float, v2: float) -> float:
        return math.fmod(v1, v2)

    @staticmethod
    @member("inc")
    def inc_float(v: float) -> float:
        return v + 1.0

    @staticmethod
    @member("dec")
    def dec_float(v: float) -> float:
        return v - 1.0

    @staticmethod
    @member("negate")
    def negate_float(v: float) -> float:
        return -v

    @staticmethod
    @member("compare")
    def compare_float(v1: float, v2: float) -> int:
        return _sign(v1 - v2)

    # ── Decimal ──

    @staticmethod
    @member("add")
    def add_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return v1 + v2

    @staticmethod
    @member("sub")
    def sub_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return v1 - v2

    @staticmethod
    @member("subtract")
    def subtract_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return v1 - v2

    @staticmethod
    @member("mul")
    def mul_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return v1 * v2

    @staticmethod
    @member("div")
    def div_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return v1 / v2

    @staticmethod
    @member("divide")
    def divide_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return v1 / v2

    @staticmethod
    @member("mod")
    def mod_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        # Decimal % already keeps the dividend's sign
        return v1 % v2

    @staticmethod
    @member("negate")
    def negate_decimal(v: Decimal) -> Decimal:
        return -v

    @staticmethod
    @member("compare")
    def compare_decimal(v1: Decimal, v2: Decimal) -> int:
        return int(v1.compare(v2))


class MathFunctions:
    """Typed ``math`` helpers, registered next to :class:`NumberFunctions`.

    ``math`` itself cannot be registered: its parameters carry no
    annotations, so template strings would never be converted.  The
    ``*_exact`` functions raise ``OverflowError`` outside int64.
    """

    # ── int ──

    @staticmethod
    def abs(v: int) -> int:
        return -v if v < 0 else v

    @staticmethod
    def max(v1: int, v2: int) -> int:
        return v1 if v1 >= v2 else v2

    @staticmethod
    def min(v1: int, v2: int) -> int:
        return v1 if v1 <= v2 else v2

    @staticmethod
    def signum(v: int) -> int:
        return _sign(v)

    @staticmethod
    def pow(v: int, exponent: int) -> float:
        return math.pow(v, exponent)

    @staticmethod
    def sqrt(v: int) -> float:
        return math.sqrt(v)

    @staticmethod
    def cbrt(v: int) -> float:
        return _cbrt(float(v))

    @staticmethod
    def floor_div(v1: int, v2: int) -> int:
        return v1 // v2

    @staticmethod
    def floor_mod(v1: int, v2: int) -> int:
        return v1 % v2

    @staticmethod
    def add_exact(v1: int, v2: int) -> Long:
        return _narrow(v1 + v2, p_long)

    @staticmethod
    def subtract_exact(v1: int, v2: int) -> Long:
        return _narrow(v1 - v2, p_long)

    @staticmethod
    def multiply_exact(v1: int, v2: int) -> Long:
        return _narrow(v1 * v2, p_long)

    @staticmethod
    def negate_exact(v: int) -> Long:
        return _narrow(-v, p_long)

    @staticmethod
    def increment_exact(v: int) -> Long:
        return _narrow(v + 1, p_long)

    @staticmethod
    def decrement_exact(v: int) -> Long:
        return _narrow(v - 1, p_long)

    @staticmethod
    def to_int_exact(v: int) -> Int:
        return _narrow(v, p_int)

    # ── float ──

    @staticmethod
    @member("abs")
    def abs_float(v: float) -> float:
        return math.fabs(v)

    @staticmethod
    @member("max")
    def max_float(v1: float, v2: float) -> float:
        return max(v1, v2)

    @staticmethod
    @member("min")
    def min_float(v1: float, v2: float) -> float:
        return min(v1, v2)

    @staticmethod
    @member("signum")
    def signum_float(v: float) -> float:
        return v if v == 0 or math.isnan(v) else math.copysign(1.0, v)

    @staticmethod
    @member("pow")
    def pow_float(v: float, exponent: float) -> float:
        return math.pow(v, exponent)

    @staticmethod
    @member("sqrt")
    def sqrt_float(v: float) -> float:
        return math.sqrt(v)

    @staticmethod
    @member("cbrt")
    def cbrt_float(v: float) -> float:
        return _cbrt(v)

    @staticmethod
    def hypot(v1: float, v2: float) -> float:
        return math.hypot(v1, v2)

    @staticmethod
    def exp(v: float) -> float:
        return math.exp(v)

    @staticmethod
    def log(v: float) -> float:
        return math.log(v)

    @staticmethod
    def log10(v: float) -> float:
        return math.log10(v)

    @staticmethod
    def floor(v: float) -> float:
        return float(math.floor(v))

    @staticmethod
    def ceil(v: float) -> float:
        return float(math.ceil(v))

    @staticmethod
    def round(v: float) -> int:
        """Half-up rounding, unlike the builtin's half-even."""
        return math.floor(v + 0.5)

    @staticmethod
    def to_degrees(v: float) -> float:
        return math.degrees(v)

    @staticmethod
    def to_radians(v: float) -> float:
        return math.radians(v)

    # ── Decimal ──

    @staticmethod
    @member("abs")
    def abs_decimal(v: Decimal) -> Decimal:
        return abs(v)

    @staticmethod
    @member("max")
    def max_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return max(v1, v2)

    @staticmethod
    @member("min")
    def min_decimal(v1: Decimal, v2: Decimal) -> Decimal:
        return min(v1, v2)

    @staticmethod
    @member("signum")
    def signum_decimal(v: Decimal) -> int:
        return _sign(v)

    @staticmethod
    @member("sqrt")
    def sqrt_decimal(v: Decimal) -> Decimal:
        return v.sqrt()


def _cbrt(v: float) -> float:
    return math.copysign(math.fabs(v) ** (1.0 / 3.0), v)
