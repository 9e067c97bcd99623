"""Queue that plays sounds one after the other."""

from __future__ import annotations

import threading
from typing import List, Optional, Tuple

from audioflow.samples import SampleFormat, SizeHint, _size_hint
from audioflow.source import Source

# How many samples a source with no usable length hint may play before the
# queue reports a frame boundary.
_FRAME_THRESHOLD = 512

# Silence played while a keep-alive queue has nothing to play: 10 ms at 44100 Hz, mono.
_SILENCE_RATE = 44100
_SILENCE_SAMPLES = 441


class _Empty(Source):
    """A source that yields nothing."""

    def __init__(self, sample_format: SampleFormat) -> None:
        self._format = sample_format

    @property
    def channels(self) -> int:
        return 1

    @property
    def sample_rate(self) -> int:
        return 48000

    @property
    def sample_format(self) -> SampleFormat:
        return self._format

    def __next__(self):
        raise StopIteration

    def size_hint(self) -> SizeHint:
        return 0, 0


class _Silence(Source):
    """A fixed number of silent samples."""

    def __init__(self, channels: int, sample_rate: int, count: int, sample_format: SampleFormat) -> None:
        self._channels = channels
        self._sample_rate = sample_rate
        self._remaining = count
        self._format = sample_format

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return self._format

    def __next__(self):
        if self._remaining <= 0:
            raise StopIteration
        self._remaining -= 1
        return self._format.zero_value()

    def size_hint(self) -> SizeHint:
        return self._remaining, self._remaining


class SourcesQueueInput:
    """The input side of a queue: sounds appended here play in order."""

    def __init__(self, keep_alive_if_empty: bool, sample_format: SampleFormat) -> None:
        self.sample_format = sample_format
        self._lock = threading.Lock()
        self._next_sounds: List[Tuple[Source, Optional[threading.Event]]] = []
        self._keep_alive_if_empty = keep_alive_if_empty

    def _check_format(self, source: Source) -> None:
        if source.sample_format is not self.sample_format:
            raise ValueError(
                f"source yields {source.sample_format.value} samples, "
                f"queue expects {self.sample_format.value}"
            )

    def append(self, source: Source) -> None:
        """Add a source to the end of the queue."""
        self._check_format(source)
        with self._lock:
            self._next_sounds.append((source, None))

    def append_with_signal(self, source: Source) -> threading.Event:
        """Add a source to the end of the queue.

        The returned event is set once the sound has finished playing.
        """
        self._check_format(source)
        finished = threading.Event()
        with self._lock:
            self._next_sounds.append((source, finished))
        return finished

    def set_keep_alive_if_empty(self, keep_alive_if_empty: bool) -> None:
        """Set whether the queue plays silence instead of ending when it runs dry."""
        with self._lock:
            self._keep_alive_if_empty = keep_alive_if_empty

    def _pop_next(self) -> Optional[Tuple[Source, Optional[threading.Event]]]:
        with self._lock:
            if self._next_sounds:
                return self._next_sounds.pop(0)
            if self._keep_alive_if_empty:
                silence = _Silence(1, _SILENCE_RATE, _SILENCE_SAMPLES, self.sample_format)
                return silence, None
            return None


class SourcesQueueOutput(Source):
    """The output side of a queue: plays the appended sounds one after another."""

    def __init__(self, input: SourcesQueueInput) -> None:
        self._input = input
        self._current: Source = _Empty(input.sample_format)
        self._signal_after_end: Optional[threading.Event] = None

    @property
    def channels(self) -> int:
        return self._current.channels

    @property
    def sample_rate(self) -> int:
        return self._current.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return self._input.sample_format

    @property
    def current_frame_len(self) -> Optional[int]:
        # The boundary between two sounds must also be a frame boundary.
        frame_len = self._current.current_frame_len
        if frame_len:
            return frame_len
        lower, _ = _size_hint(self._current)
        if lower > 0:
            return lower
        return _FRAME_THRESHOLD

    def __next__(self):
        while True:
            value = next(self._current, None)
            if value is not None:
                return value
            if not self._go_next():
                raise StopIteration

    def size_hint(self) -> SizeHint:
        return _size_hint(self._current)[0], None

    def _go_next(self) -> bool:
        """Move on to the next sound; return False when the queue has ended."""
        if self._signal_after_end is not None:
            self._signal_after_end.set()
            self._signal_after_end = None
        upcoming = self._input._pop_next()
        if upcoming is None:
            return False
        self._current, self._signal_after_end = upcoming
        return True


def queue(
    keep_alive_if_empty: bool,
    sample_format: SampleFormat = SampleFormat.I16,
) -> Tuple[SourcesQueueInput, SourcesQueueOutput]:
    """Build a queue, returning its input and output.

    With ``keep_alive_if_empty`` the output plays silence while nothing is
    queued; otherwise it ends as soon as it runs out of sounds.
    """
    input = SourcesQueueInput(keep_alive_if_empty, sample_format)
    return input, SourcesQueueOutput(input)