from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Any

import numpy as np

from .bits import clean_input, validate_bits
from .datatypes import FloatPreset, FormatParams
from .numeric import (
    decimal_context,
    floor_log2,
    output_digits,
    pow2,
    round_half_up,
    to_precision,
    working_precision,
)

INFINITY_TOKENS = {"inf", "infinity"}
NAN_TOKENS = {"nan"}


class InputError(ValueError):
    """Decimal text that is neither a number, an infinity nor a NaN."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid decimal input: {text!r}")
        self.text = text


class Classification(str, Enum):
    NORMAL = "Normal"
    DENORMAL = "Denormal"
    ZERO = "Zero"
    INFINITY = "Infinity"
    NAN = "NaN"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DecodedValue:
    decimal_value: str
    classification: Classification


@dataclass(frozen=True)
class FormatCharacteristics:
    total_bits: str
    bias: str
    epsilon: str
    max_normal: str
    min_normal: str
    min_denormal: str


def _infinity_bits(sign: str, params: FormatParams) -> str:
    return sign + "1" * params.exponent_bits + "0" * params.mantissa_bits


def _nan_bits(sign: str, params: FormatParams) -> str:
    return sign + "1" * params.exponent_bits + "1" * params.mantissa_bits


def _zero_bits(sign: str, params: FormatParams) -> str:
    return sign + "0" * (params.exponent_bits + params.mantissa_bits)


def _parse_magnitude(token: str, text: str) -> Decimal:
    # Decimal() also takes "nan", "snan", "inf" and signed forms; only plain
    # unsigned numbers are left at this point.
    if not token or token[0] in "+-":
        raise InputError(text)
    try:
        value = Decimal(token)
    except InvalidOperation as exc:
        raise InputError(text) from exc
    if not value.is_finite():
        raise InputError(text)
    return value


def encode(text: str, params: FormatParams) -> str:
    """Encode decimal text into a sign/exponent/mantissa bit string.

    Magnitudes above the largest normal saturate to infinity; magnitudes
    below half the smallest denormal flush to a signed zero. The scaled
    mantissa is rounded half up.
    """
    token = clean_input(text).lower()
    sign = "0"
    if token.startswith("-"):
        sign = "1"
        token = token[1:]
    if token.startswith("+"):
        token = token[1:]

    if token in INFINITY_TOKENS:
        return _infinity_bits(sign, params)
    if token in NAN_TOKENS:
        return _nan_bits(sign, params)

    magnitude = _parse_magnitude(token, text)
    if magnitude.is_zero():
        return _zero_bits(sign, params)

    with localcontext(decimal_context(working_precision(params.mantissa_bits))):
        # 10**a <= |d| < 10**(a+1), and 8**k <= 10**k <= 16**k for k >= 0.
        adjusted = magnitude.adjusted()
        if 3 * adjusted > params.max_normal_exponent + 1:
            return _infinity_bits(sign, params)
        if adjusted < 0 and 3 * (adjusted + 1) < (
            params.min_normal_exponent - params.mantissa_bits - 1
        ):
            return _zero_bits(sign, params)

        exponent = floor_log2(magnitude)

        if exponent < params.min_normal_exponent:
            exponent_field = 0
            scaled = magnitude * pow2(params.mantissa_bits - params.min_normal_exponent)
            mantissa = round_half_up(scaled)
            if mantissa == 0:
                return _zero_bits(sign, params)
        elif exponent > params.max_normal_exponent:
            return _infinity_bits(sign, params)
        else:
            exponent_field = exponent + params.bias
            significand = magnitude / pow2(exponent)
            mantissa = round_half_up((significand - 1) * pow2(params.mantissa_bits))

    if mantissa >= 1 << params.mantissa_bits:
        mantissa = 0
        exponent_field += 1
        if exponent_field >= params.exponent_all_ones:
            return _infinity_bits(sign, params)

    return (
        sign
        + format(exponent_field, f"0{params.exponent_bits}b")
        + format(mantissa, f"0{params.mantissa_bits}b")
    )


def classify(bits: str, params: FormatParams) -> Classification:
    _, exponent_text, mantissa_text = params.split(bits)
    exponent_all_ones = "0" not in exponent_text
    exponent_all_zeros = "1" not in exponent_text
    mantissa_zero = "1" not in mantissa_text

    if exponent_all_ones:
        return Classification.INFINITY if mantissa_zero else Classification.NAN
    if exponent_all_zeros:
        return Classification.ZERO if mantissa_zero else Classification.DENORMAL
    return Classification.NORMAL


def decode(bits: str, params: FormatParams) -> DecodedValue:
    validate_bits(bits, params)
    classification = classify(bits, params)
    sign_text, exponent_text, mantissa_text = params.split(bits)
    negative = sign_text == "1"

    if classification is Classification.INFINITY:
        return DecodedValue("-Infinity" if negative else "Infinity", classification)
    if classification is Classification.NAN:
        return DecodedValue("NaN", classification)
    if classification is Classification.ZERO:
        return DecodedValue("0", classification)

    if classification is Classification.DENORMAL:
        exponent = params.min_normal_exponent
        implicit_bit = 0
    else:
        exponent = int(exponent_text, 2) - params.bias
        implicit_bit = 1

    significand = (implicit_bit << params.mantissa_bits) | int(mantissa_text, 2)
    if significand == 0:
        return DecodedValue("0", Classification.ZERO)

    with localcontext(decimal_context()):
        value = Decimal(significand) * pow2(exponent - params.mantissa_bits)
        if negative:
            value = -value

    return DecodedValue(
        to_precision(value, output_digits(params.mantissa_bits)),
        classification,
    )


def format_characteristics(params: FormatParams) -> FormatCharacteristics:
    digits = output_digits(params.mantissa_bits)
    with localcontext(decimal_context()):
        epsilon = pow2(-params.mantissa_bits)
        max_normal = (2 - epsilon) * pow2(params.max_normal_exponent)
        min_normal = pow2(params.min_normal_exponent)
        min_denormal = pow2(1 - params.bias - params.mantissa_bits)

    return FormatCharacteristics(
        total_bits=str(params.total_bits),
        bias=str(params.bias),
        epsilon=to_precision(epsilon, digits),
        max_normal=to_precision(max_normal, digits),
        min_normal=to_precision(min_normal, digits),
        min_denormal=to_precision(min_denormal, digits),
    )


def _uint_dtype_for_bits(bits: int) -> Any:
    if bits == 16:
        return np.uint16
    if bits == 32:
        return np.uint32
    if bits == 64:
        return np.uint64
    raise ValueError(f"Unsupported native float width: {bits}")


def native_value(bits: str, preset: FloatPreset) -> float:
    """Reinterpret the bit string as the preset's numpy float type."""
    if preset.numpy_dtype is None:
        raise ValueError(f"Preset {preset.name!r} has no native numpy type.")
    params = preset.params
    validate_bits(bits, params)
    raw = np.array([int(bits, 2)], dtype=_uint_dtype_for_bits(params.total_bits))
    return float(raw.view(preset.numpy_dtype)[0])
