from __future__ import annotations

from . import bits as bitops
from .codec import (
    DecodedValue,
    FormatCharacteristics,
    decode,
    encode,
    format_characteristics,
)
from .datatypes import FormatParams, configure, find_preset


class FloatSession:
    """Holds the one live bit string and the format it is read under.

    Every mutation goes through the pure helpers in `floacon.bits` and
    `floacon.codec`; decoded and rendered views are recomputed on access.
    """

    def __init__(self, exponent_bits: int = 8, mantissa_bits: int = 23) -> None:
        self._params, self._bits = configure(exponent_bits, mantissa_bits)

    @property
    def params(self) -> FormatParams:
        return self._params

    @property
    def bits(self) -> str:
        return self._bits

    @property
    def decoded(self) -> DecodedValue:
        return decode(self._bits, self._params)

    @property
    def binary(self) -> str:
        return bitops.to_binary_grouped(self._bits, self._params)

    @property
    def hex(self) -> str:
        return bitops.to_hex(self._bits)

    @property
    def characteristics(self) -> FormatCharacteristics:
        return format_characteristics(self._params)

    def configure(self, exponent_bits: int, mantissa_bits: int) -> None:
        self._params, self._bits = configure(exponent_bits, mantissa_bits)

    def apply_preset(self, name: str) -> None:
        preset = find_preset(name)
        self.configure(preset.exponent_bits, preset.mantissa_bits)

    def toggle(self, index: int) -> None:
        self._bits = bitops.toggle_bit(self._bits, index)

    def set_remaining(self, index: int, value: str) -> None:
        self._bits = bitops.set_range(self._bits, index, value)

    def set_all(self, value: str) -> None:
        self._bits = bitops.set_all(self._bits, value)

    def invert(self) -> None:
        self._bits = bitops.invert(self._bits)

    def convert(self, text: str) -> str:
        # encode raises before assignment, so a bad input leaves bits as-is.
        self._bits = encode(text, self._params)
        return self._bits

    def load_hex(self, text: str) -> str:
        self._bits = bitops.from_hex(text, self._params)
        return self._bits

    def load_bits(self, text: str) -> str:
        self._bits = bitops.validate_bits(bitops.clean_input(text), self._params)
        return self._bits
