from __future__ import annotations

import re

from .datatypes import FormatParams

BIT_VALUES = {"0", "1"}
HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def clean_input(text: str) -> str:
    return text.strip().replace("_", "").replace(" ", "")


def zero_bits(params: FormatParams) -> str:
    return "0" * params.total_bits


def validate_bits(bits: str, params: FormatParams) -> str:
    if len(bits) != params.total_bits:
        raise ValueError(
            f"Expected {params.total_bits} bits; got {len(bits)}."
        )
    if any(ch not in BIT_VALUES for ch in bits):
        raise ValueError("Bit string must contain only 0/1.")
    return bits


def _check_bit_value(value: str) -> None:
    if value not in BIT_VALUES:
        raise ValueError(f"Bit value must be '0' or '1'; got {value!r}.")


def _check_index(bits: str, index: int) -> None:
    if not 0 <= index < len(bits):
        raise IndexError(f"Bit index {index} out of range for {len(bits)} bits.")


def toggle_bit(bits: str, index: int) -> str:
    _check_index(bits, index)
    flipped = "1" if bits[index] == "0" else "0"
    return bits[:index] + flipped + bits[index + 1 :]


def set_range(bits: str, from_index: int, value: str) -> str:
    """Set every bit from `from_index` to the end to `value`."""
    _check_index(bits, from_index)
    _check_bit_value(value)
    return bits[:from_index] + value * (len(bits) - from_index)


def set_all(bits: str, value: str) -> str:
    _check_bit_value(value)
    return value * len(bits)


def invert(bits: str) -> str:
    return "".join("1" if ch == "0" else "0" for ch in bits)


def to_binary_grouped(bits: str, params: FormatParams) -> str:
    sign, exponent, mantissa = params.split(bits)
    return f"{sign} {exponent} {mantissa}"


def hex_width(total_bits: int) -> int:
    return -(-total_bits // 4)


def to_hex(bits: str) -> str:
    return "0x" + format(int(bits, 2), "X").zfill(hex_width(len(bits)))


def from_hex(text: str, params: FormatParams) -> str:
    cleaned = clean_input(text)
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    if not HEX_DIGITS.fullmatch(cleaned):
        raise ValueError(f"Invalid hex input: {text!r}")
    raw = int(cleaned, 16)
    if raw >> params.total_bits:
        raise ValueError(
            f"Hex value {text!r} does not fit in {params.total_bits} bits."
        )
    return format(raw, f"0{params.total_bits}b")
