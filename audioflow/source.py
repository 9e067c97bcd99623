"""The common interface of every stream of samples."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional

from audioflow.samples import DataConverter, SampleFormat, SizeHint


class Source(ABC):
    """An iterator of interleaved samples that also describes its own format.

    Subclasses provide ``__next__`` and the ``channels``, ``sample_rate`` and
    ``sample_format`` properties. ``current_frame_len`` is the number of
    samples left before the channel count or sample rate may change (``None``
    when they never do), and ``total_duration`` is the length of the whole
    sound when it is known.
    """

    @property
    @abstractmethod
    def channels(self) -> int:
        """Number of interleaved channels."""

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """Frames per second."""

    @property
    @abstractmethod
    def sample_format(self) -> SampleFormat:
        """Representation of the samples this source yields."""

    @property
    def current_frame_len(self) -> Optional[int]:
        """Samples left in the current span of constant format, if bounded."""
        return None

    @property
    def total_duration(self) -> Optional[timedelta]:
        """Length of the whole sound, if known."""
        return None

    def __iter__(self) -> "Source":
        return self

    @abstractmethod
    def __next__(self):
        """Return the next sample, raising ``StopIteration`` at the end."""

    def size_hint(self) -> SizeHint:
        """Bounds on the number of samples left."""
        return 0, None

    def convert_samples(self, target: SampleFormat) -> "Source":
        """Return a source that yields this source's samples in ``target`` format."""
        return _ConvertedSource(self, target)


class _ConvertedSource(Source):
    """A source whose samples are converted to another format on the fly."""

    def __init__(self, inner: Source, target: SampleFormat) -> None:
        self._inner = inner
        self._target = target
        self._converter = DataConverter(inner, inner.sample_format, target)

    @property
    def channels(self) -> int:
        return self._inner.channels

    @property
    def sample_rate(self) -> int:
        return self._inner.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return self._target

    @property
    def current_frame_len(self) -> Optional[int]:
        return self._inner.current_frame_len

    @property
    def total_duration(self) -> Optional[timedelta]:
        return self._inner.total_duration

    def __next__(self):
        return next(self._converter)

    def size_hint(self) -> SizeHint:
        return self._inner.size_hint()