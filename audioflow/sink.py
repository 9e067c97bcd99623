"""A controllable audio track that plays its sounds one after another."""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Optional, Tuple

from audioflow.queue import SourcesQueueInput, SourcesQueueOutput, queue
from audioflow.samples import SampleFormat, SizeHint
from audioflow.source import Source

_CONTROL_PERIOD_MS = 5
_END = object()


class _Controls:
    """State shared between a sink and the sources it plays."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.paused = False
        self.volume = 1.0
        self.stopped = False


class _Counter:
    """A thread-safe count of sounds still queued."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def add(self, amount: int) -> None:
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class _ControlledSource(Source):
    """Wraps a sound so it follows the sink's pause, volume and stop controls.

    The controls are read before the first sample and then every few
    milliseconds of audio. Samples come out as 32-bit floats, and the sink's
    sound count drops once the sound ends.
    """

    def __init__(self, inner: Source, controls: _Controls, counter: _Counter) -> None:
        self._inner = inner
        self._format = inner.sample_format
        self._controls = controls
        self._counter = counter
        period = _CONTROL_PERIOD_MS * inner.sample_rate // 1000 * inner.channels
        self._update_every = max(1, period)
        self._until_update = 1
        self._factor = 1.0
        self._paused_channels: Optional[int] = None
        self._remaining_paused = 0
        self._stopped = False
        self._finished = False

    @property
    def channels(self) -> int:
        return self._inner.channels

    @property
    def sample_rate(self) -> int:
        return self._inner.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return SampleFormat.F32

    @property
    def current_frame_len(self) -> Optional[int]:
        return self._inner.current_frame_len

    @property
    def total_duration(self) -> Optional[timedelta]:
        return self._inner.total_duration

    def size_hint(self) -> SizeHint:
        return self._inner.size_hint()

    def _apply_controls(self) -> None:
        controls = self._controls
        with controls.lock:
            if controls.stopped:
                self._stopped = True
                return
            self._factor = controls.volume
            paused = controls.paused
        self._paused_channels = self._inner.channels if paused else None

    def _paused_next(self):
        if self._remaining_paused > 0:
            self._remaining_paused -= 1
            return self._format.zero_value()
        if self._paused_channels is not None:
            self._remaining_paused = self._paused_channels - 1
            return self._format.zero_value()
        return next(self._inner, _END)

    def __next__(self):
        self._until_update -= 1
        if self._until_update == 0:
            self._apply_controls()
            self._until_update = self._update_every

        value = _END if self._stopped else self._paused_next()
        if value is _END:
            if not self._finished:
                self._finished = True
                self._counter.add(-1)
            raise StopIteration
        amplified = self._format.amplify(value, self._factor)
        return self._format.convert(amplified, SampleFormat.F32)


class Sink:
    """An audio track: queued sounds play in order and share pause, volume and stop.

    Closing the sink stops its sounds; call ``detach`` to let them finish.
    """

    def __init__(self, queue_input: SourcesQueueInput) -> None:
        self._queue_input = queue_input
        self._controls = _Controls()
        self._sound_count = _Counter()
        self._end_lock = threading.Lock()
        self._until_end: Optional[threading.Event] = None
        self._detached = False

    @classmethod
    def new_idle(cls) -> Tuple["Sink", SourcesQueueOutput]:
        """Build a sink together with the queue output that plays it."""
        queue_input, queue_output = queue(True, SampleFormat.F32)
        return cls(queue_input), queue_output

    def append(self, source: Source) -> None:
        """Add a sound to the end of the sink's queue."""
        controlled = _ControlledSource(source, self._controls, self._sound_count)
        self._sound_count.add(1)
        finished = self._queue_input.append_with_signal(controlled)
        with self._end_lock:
            self._until_end = finished

    @property
    def volume(self) -> float:
        """The factor every sample is multiplied by; ``1.0`` leaves sounds unchanged."""
        with self._controls.lock:
            return self._controls.volume

    @volume.setter
    def volume(self, value: float) -> None:
        with self._controls.lock:
            self._controls.volume = value

    def play(self) -> None:
        """Resume playback; no effect if not paused."""
        with self._controls.lock:
            self._controls.paused = False

    def pause(self) -> None:
        """Pause playback; no effect if already paused."""
        with self._controls.lock:
            self._controls.paused = True

    @property
    def is_paused(self) -> bool:
        """Whether the sink is paused."""
        with self._controls.lock:
            return self._controls.paused

    def stop(self) -> None:
        """Stop every sound in the sink."""
        with self._controls.lock:
            self._controls.stopped = True

    def detach(self) -> None:
        """Let go of the sink without stopping the sounds still playing."""
        self._detached = True
        self.close()

    def close(self) -> None:
        """Let the queue end once empty and, unless detached, stop all sounds."""
        self._queue_input.set_keep_alive_if_empty(False)
        if not self._detached:
            self.stop()

    def sleep_until_end(self, timeout: Optional[float] = None) -> bool:
        """Block until the last appended sound has finished.

        Returns False if ``timeout`` seconds pass first.
        """
        with self._end_lock:
            finished, self._until_end = self._until_end, None
        if finished is None:
            return True
        if finished.wait(timeout):
            return True
        with self._end_lock:
            if self._until_end is None:
                self._until_end = finished
        return False

    def empty(self) -> bool:
        """Whether no sounds are left to play."""
        return len(self) == 0

    def __len__(self) -> int:
        return self._sound_count.value

    def __enter__(self) -> "Sink":
        return self

    def __exit__(self, *args) -> None:
        self.close()