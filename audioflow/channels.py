"""Conversion between channel counts of an interleaved sample stream."""

from __future__ import annotations

from typing import Iterable, Iterator

from audioflow.samples import SizeHint, _size_hint

_END = object()


class ChannelCountConverter:
    """Iterator that turns interleaved frames of one channel count into another.

    Extra input channels are dropped; missing output channels repeat the last
    input channel of the frame.
    """

    def __init__(self, input: Iterable, from_channels: int, to_channels: int) -> None:
        if from_channels < 1:
            raise ValueError("from_channels must be at least 1")
        if to_channels < 1:
            raise ValueError("to_channels must be at least 1")
        self._input: Iterator = iter(input)
        self._from = from_channels
        self._to = to_channels
        self._repeat = _END
        self._position = 0

    def __iter__(self) -> "ChannelCountConverter":
        return self

    def __next__(self):
        if self._position == self._from - 1:
            value = next(self._input, _END)
            self._repeat = value
        elif self._position < self._from:
            value = next(self._input, _END)
        else:
            value = self._repeat

        self._position += 1
        if self._position == self._to:
            self._position = 0
            for _ in range(self._to, self._from):
                next(self._input, None)

        if value is _END:
            raise StopIteration
        return value

    def size_hint(self) -> SizeHint:
        """Bounds on the number of samples left."""
        low, high = _size_hint(self._input)

        def scale(count: int) -> int:
            return (count // self._from) * self._to + self._position

        return scale(low), None if high is None else scale(high)

    def __len__(self) -> int:
        low, high = self.size_hint()
        if high != low:
            raise TypeError("length of the input is not known")
        return low

    def into_inner(self) -> Iterator:
        """Return the underlying iterator."""
        return self._input