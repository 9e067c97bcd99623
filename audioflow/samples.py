"""Sample formats, per-sample arithmetic and conversion between formats."""

from __future__ import annotations

import math
import operator
from enum import Enum
from typing import Any, Iterable, Iterator, Optional, Tuple

I16_MIN = -32768
I16_MAX = 32767
U16_MAX = 65535
U16_ZERO = 32768

SizeHint = Tuple[int, Optional[int]]


def _size_hint(iterator: Any) -> SizeHint:
    """Return ``(lower, upper)`` bounds on the items an iterator has left."""
    hint = getattr(iterator, "size_hint", None)
    if callable(hint):
        return hint()
    if hasattr(iterator, "__len__"):
        length = len(iterator)
        return length, length
    if hasattr(type(iterator), "__length_hint__"):
        length = operator.length_hint(iterator)
        return length, length
    return 0, None


def _float_to_int(value: float, low: int, high: int) -> int:
    """Truncate a float towards zero, saturating at the bounds; NaN gives 0."""
    if math.isnan(value):
        return 0
    if value >= high:
        return high
    if value <= low:
        return low
    return int(value)


def _round_half_away(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _div_trunc(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def _wrap_i16(value: int) -> int:
    return (value + 0x8000) % 0x10000 - 0x8000


def _wrap_u16(value: int) -> int:
    return value % 0x10000


class SampleFormat(Enum):
    """The representation of a single sample value.

    - ``I16``: silence is ``0``, amplitudes span ``-32768`` to ``32767``.
    - ``U16``: silence is ``32768``, amplitudes span ``0`` to ``65535``.
    - ``F32``: silence is ``0.0``, amplitudes span ``-1.0`` to ``1.0``.
    """

    I16 = "i16"
    U16 = "u16"
    F32 = "f32"

    def lerp(self, first, second, numerator: int, denominator: int):
        """Interpolate linearly from ``first`` towards ``second`` by ``numerator / denominator``."""
        if self is SampleFormat.F32:
            return first + (second - first) * float(numerator) / float(denominator)
        value = first + _div_trunc((second - first) * numerator, denominator)
        if self is SampleFormat.I16:
            return _wrap_i16(value)
        return _wrap_u16(value)

    def amplify(self, value, factor: float):
        """Multiply a sample by ``factor``."""
        if self is SampleFormat.F32:
            return value * factor
        if self is SampleFormat.I16:
            return _float_to_int(float(value) * factor, I16_MIN, I16_MAX)
        as_i16 = SampleFormat.U16.convert(value, SampleFormat.I16)
        amplified = SampleFormat.I16.amplify(as_i16, factor)
        return SampleFormat.I16.convert(amplified, SampleFormat.U16)

    def saturating_add(self, first, second):
        """Add two samples, clamping integer formats to their range."""
        if self is SampleFormat.F32:
            return first + second
        if self is SampleFormat.I16:
            return max(I16_MIN, min(I16_MAX, first + second))
        return max(0, min(U16_MAX, first + second))

    def zero_value(self):
        """Return the value that stands for silence."""
        if self is SampleFormat.F32:
            return 0.0
        if self is SampleFormat.I16:
            return 0
        return U16_ZERO

    def convert(self, value, target: "SampleFormat"):
        """Convert a sample of this format into ``target``."""
        if self is target:
            return value
        if target is SampleFormat.I16:
            if self is SampleFormat.U16:
                return value - U16_ZERO
            if value >= 0.0:
                return _float_to_int(value * I16_MAX, I16_MIN, I16_MAX)
            return _float_to_int(-value * I16_MIN, I16_MIN, I16_MAX)
        if target is SampleFormat.U16:
            if self is SampleFormat.I16:
                return value + U16_ZERO
            scaled = _round_half_away((value + 1.0) * 0.5 * U16_MAX)
            return _float_to_int(scaled, 0, U16_MAX)
        as_i16 = self.convert(value, SampleFormat.I16)
        if as_i16 < 0:
            return as_i16 / -float(I16_MIN)
        return as_i16 / float(I16_MAX)


class DataConverter:
    """Iterator that converts every sample of its input to another format."""

    def __init__(
        self,
        input: Iterable,
        source_format: SampleFormat,
        target_format: SampleFormat,
    ) -> None:
        self._input: Iterator = iter(input)
        self.source_format = source_format
        self.target_format = target_format

    def __iter__(self) -> "DataConverter":
        return self

    def __next__(self):
        value = next(self._input)
        return self.source_format.convert(value, self.target_format)

    def size_hint(self) -> SizeHint:
        """Bounds on the number of samples left."""
        return _size_hint(self._input)

    def into_inner(self) -> Iterator:
        """Return the underlying iterator."""
        return self._input