from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Context, Decimal, localcontext

DEFAULT_PRECISION = 100
SHORT_OUTPUT_DIGITS = 17
LONG_OUTPUT_DIGITS = 30
SHORT_OUTPUT_MAX_MANTISSA = 53

TWO = Decimal(2)


def working_precision(mantissa_bits: int) -> int:
    return max(DEFAULT_PRECISION, 2 * mantissa_bits)


def decimal_context(precision: int = DEFAULT_PRECISION) -> Context:
    # Wide exponent range: binary128 denormals sit near 2^-16494.
    return Context(
        prec=precision,
        rounding=ROUND_HALF_UP,
        Emin=-999999,
        Emax=999999,
    )


def pow2(exponent: int) -> Decimal:
    """2**exponent in the active decimal context."""
    return TWO**exponent


def floor_log2(value: Decimal) -> int:
    """Largest e with 2**e <= value, for a positive finite value.

    The logarithm is only an estimate near exact powers of two, so the
    result is pinned down by comparing against the neighbouring powers.
    """
    estimate = (value.ln() / TWO.ln()).to_integral_value(rounding=ROUND_FLOOR)
    exponent = int(estimate)
    while pow2(exponent) > value:
        exponent -= 1
    while pow2(exponent + 1) <= value:
        exponent += 1
    return exponent


def round_half_up(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def output_digits(mantissa_bits: int) -> int:
    if mantissa_bits <= SHORT_OUTPUT_MAX_MANTISSA:
        return SHORT_OUTPUT_DIGITS
    return LONG_OUTPUT_DIGITS


def to_precision(value: Decimal, digits: int) -> str:
    """Render value with exactly `digits` significant digits.

    Exponential form is used when the decimal exponent is below -6 or not
    smaller than `digits`; ties round half up.
    """
    if value.is_zero():
        sign = "-" if value.is_signed() else ""
        if digits == 1:
            return f"{sign}0"
        return f"{sign}0.{'0' * (digits - 1)}"

    with localcontext(decimal_context(digits)):
        rounded = +value

    sign, digit_tuple, _ = rounded.as_tuple()
    coefficient = "".join(str(d) for d in digit_tuple).ljust(digits, "0")
    adjusted = rounded.adjusted()
    prefix = "-" if sign else ""

    if adjusted < -6 or adjusted >= digits:
        head = coefficient[0]
        tail = coefficient[1:]
        mantissa = f"{head}.{tail}" if tail else head
        exp_sign = "+" if adjusted >= 0 else "-"
        return f"{prefix}{mantissa}e{exp_sign}{abs(adjusted)}"

    if adjusted >= 0:
        integer_part = coefficient[: adjusted + 1]
        fraction = coefficient[adjusted + 1 :]
        if fraction:
            return f"{prefix}{integer_part}.{fraction}"
        return f"{prefix}{integer_part}"

    return f"{prefix}0.{'0' * (-adjusted - 1)}{coefficient}"
