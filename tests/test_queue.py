import pytest

from audioflow.buffer import SamplesBuffer
from audioflow.queue import queue
from audioflow.samples import SampleFormat


def test_samples_play_in_order():
    tx, rx = queue(False)
    tx.append(SamplesBuffer(1, 48000, [10, -10, 10, -10]))
    tx.append(SamplesBuffer(2, 96000, [5, 5, 5, 5]))

    assert rx.channels == 1
    assert rx.sample_rate == 48000
    assert [next(rx) for _ in range(4)] == [10, -10, 10, -10]
    assert next(rx) == 5
    assert rx.channels == 2
    assert rx.sample_rate == 96000
    assert [next(rx) for _ in range(3)] == [5, 5, 5]
    with pytest.raises(StopIteration):
        next(rx)


def test_immediate_end():
    _, rx = queue(False)
    assert list(rx) == []


def test_keep_alive():
    tx, rx = queue(True)
    tx.append(SamplesBuffer(1, 48000, [10, -10, 10, -10]))

    assert [next(rx) for _ in range(4)] == [10, -10, 10, -10]
    assert all(next(rx) == 0 for _ in range(100000))


def test_keep_alive_float_silence():
    _, rx = queue(True, SampleFormat.F32)
    assert [next(rx) for _ in range(5)] == [0.0] * 5


def test_stop_keep_alive_ends_queue():
    tx, rx = queue(True)
    tx.append(SamplesBuffer(1, 48000, [1, 2]))
    assert next(rx) == 1
    tx.set_keep_alive_if_empty(False)
    assert next(rx) == 2
    with pytest.raises(StopIteration):
        next(rx)


def test_signal_set_when_sound_finishes():
    tx, rx = queue(False)
    finished = tx.append_with_signal(SamplesBuffer(1, 48000, [1, 2]))
    assert next(rx) == 1
    assert next(rx) == 2
    assert not finished.is_set()
    with pytest.raises(StopIteration):
        next(rx)
    assert finished.is_set()


def test_frame_len_threshold_when_empty():
    _, rx = queue(False)
    assert rx.current_frame_len == 512


def test_frame_len_from_size_hint():
    tx, rx = queue(False)
    tx.append(SamplesBuffer(1, 48000, [1, 2, 3, 4]))
    next(rx)
    assert rx.current_frame_len == 3
    assert rx.size_hint() == (3, None)


def test_format_mismatch_rejected():
    tx, _ = queue(False, SampleFormat.F32)
    with pytest.raises(ValueError):
        tx.append(SamplesBuffer(1, 48000, [1, 2]))