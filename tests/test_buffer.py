from datetime import timedelta

import pytest

from audioflow.buffer import SamplesBuffer
from audioflow.samples import SampleFormat


def test_basic():
    buf = SamplesBuffer(1, 44100, [0, 0, 0, 0, 0, 0])
    assert buf.channels == 1
    assert buf.sample_rate == 44100
    assert buf.sample_format is SampleFormat.I16


def test_error_if_zero_channels():
    with pytest.raises(ValueError):
        SamplesBuffer(0, 44100, [0, 0, 0, 0, 0, 0])


def test_error_if_zero_sample_rate():
    with pytest.raises(ValueError):
        SamplesBuffer(1, 0, [0, 0, 0, 0, 0, 0])


def test_duration_basic():
    buf = SamplesBuffer(2, 2, [0, 0, 0, 0, 0, 0])
    dur = buf.total_duration
    assert dur.seconds == 1
    assert dur.microseconds * 1000 == 500_000_000
    assert dur == timedelta(seconds=1, microseconds=500_000)


def test_iteration():
    buf = SamplesBuffer(1, 44100, [1, 2, 3, 4, 5, 6])
    assert [next(buf) for _ in range(6)] == [1, 2, 3, 4, 5, 6]
    with pytest.raises(StopIteration):
        next(buf)


def test_size_hint_tracks_remaining():
    buf = SamplesBuffer(1, 44100, [1, 2, 3, 4, 5, 6])
    assert buf.size_hint() == (6, 6)
    next(buf)
    assert buf.size_hint() == (5, 5)


def test_no_frame_len():
    assert SamplesBuffer(2, 48000, [1, 2]).current_frame_len is None


def test_accepts_any_iterable_and_format():
    buf = SamplesBuffer(1, 8000, (x / 4 for x in range(3)), SampleFormat.F32)
    assert buf.sample_format is SampleFormat.F32
    assert list(buf) == [0.0, 0.25, 0.5]