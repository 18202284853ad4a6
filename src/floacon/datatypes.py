from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

MIN_EXPONENT_BITS = 2
MAX_EXPONENT_BITS = 15
MIN_MANTISSA_BITS = 2
MAX_MANTISSA_BITS = 112


@dataclass(frozen=True)
class FormatParams:
    """Binary floating-point layout [sign | exponent | mantissa].

    Widths are validated on construction; everything else is derived.
    """

    exponent_bits: int
    mantissa_bits: int
    bias: int = field(init=False)
    min_normal_exponent: int = field(init=False)
    max_normal_exponent: int = field(init=False)
    total_bits: int = field(init=False)

    def __post_init__(self) -> None:
        if not MIN_EXPONENT_BITS <= self.exponent_bits <= MAX_EXPONENT_BITS:
            raise ValueError(
                f"exponent_bits must be in [{MIN_EXPONENT_BITS}, {MAX_EXPONENT_BITS}];"
                f" got {self.exponent_bits}."
            )
        if not MIN_MANTISSA_BITS <= self.mantissa_bits <= MAX_MANTISSA_BITS:
            raise ValueError(
                f"mantissa_bits must be in [{MIN_MANTISSA_BITS}, {MAX_MANTISSA_BITS}];"
                f" got {self.mantissa_bits}."
            )
        bias = (1 << (self.exponent_bits - 1)) - 1
        object.__setattr__(self, "bias", bias)
        object.__setattr__(self, "min_normal_exponent", 1 - bias)
        object.__setattr__(
            self, "max_normal_exponent", (1 << self.exponent_bits) - 2 - bias
        )
        object.__setattr__(
            self, "total_bits", 1 + self.exponent_bits + self.mantissa_bits
        )

    @property
    def exponent_all_ones(self) -> int:
        return (1 << self.exponent_bits) - 1

    @property
    def mantissa_start(self) -> int:
        return 1 + self.exponent_bits

    def split(self, bits: str) -> tuple[str, str, str]:
        return (
            bits[:1],
            bits[1 : self.mantissa_start],
            bits[self.mantissa_start :],
        )


@dataclass(frozen=True)
class FloatPreset:
    name: str
    label: str
    exponent_bits: int
    mantissa_bits: int
    numpy_dtype: Any

    @property
    def params(self) -> FormatParams:
        return FormatParams(self.exponent_bits, self.mantissa_bits)


PRESETS: dict[str, FloatPreset] = {
    "binary16": FloatPreset(
        name="binary16",
        label="binary16 (Half)",
        exponent_bits=5,
        mantissa_bits=10,
        numpy_dtype=np.float16,
    ),
    "bfloat16": FloatPreset(
        name="bfloat16",
        label="bfloat16",
        exponent_bits=8,
        mantissa_bits=7,
        numpy_dtype=None,
    ),
    "binary32": FloatPreset(
        name="binary32",
        label="binary32 (Single)",
        exponent_bits=8,
        mantissa_bits=23,
        numpy_dtype=np.float32,
    ),
    "binary64": FloatPreset(
        name="binary64",
        label="binary64 (Double)",
        exponent_bits=11,
        mantissa_bits=52,
        numpy_dtype=np.float64,
    ),
    "binary128": FloatPreset(
        name="binary128",
        label="binary128 (Quad)",
        exponent_bits=15,
        mantissa_bits=112,
        numpy_dtype=None,
    ),
}


def find_preset(name: str) -> FloatPreset:
    wanted = name.strip().lower()
    for preset in PRESETS.values():
        if wanted in {preset.name.lower(), preset.label.lower()}:
            return preset
    raise ValueError(f"Unknown preset: {name!r}")


def preset_params(name: str) -> FormatParams:
    return find_preset(name).params


def configure(exponent_bits: int, mantissa_bits: int) -> tuple[FormatParams, str]:
    """Build a format and the all-zero bit string that goes with it."""
    params = FormatParams(exponent_bits, mantissa_bits)
    return params, "0" * params.total_bits
