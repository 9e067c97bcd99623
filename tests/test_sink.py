from audioflow.buffer import SamplesBuffer
from audioflow.samples import SampleFormat
from audioflow.sink import Sink

VALUES = [10, -10, 20, -20, 30, -30]


def test_pause_and_stop():
    sink, queue_rx = Sink.new_idle()

    # Low rate so the controls apply on every sample.
    sink.append(SamplesBuffer(1, 1, VALUES))
    src = SamplesBuffer(1, 1, VALUES).convert_samples(SampleFormat.F32)

    assert next(queue_rx) == next(src)
    assert next(queue_rx) == next(src)

    sink.pause()
    assert next(queue_rx) == 0.0

    sink.play()
    assert next(queue_rx) == next(src)
    assert next(queue_rx) == next(src)

    sink.stop()
    assert next(queue_rx) == 0.0
    assert sink.empty() is True


def test_volume():
    sink, queue_rx = Sink.new_idle()

    # High rate so the controls do not apply on every sample.
    sink.append(SamplesBuffer(2, 44100, VALUES))
    src = SamplesBuffer(2, 44100, VALUES).convert_samples(SampleFormat.F32)
    sink.volume = 0.5

    for _ in VALUES:
        assert next(queue_rx) == next(src) * 0.5


def test_volume_property_round_trip():
    sink, _ = Sink.new_idle()
    assert sink.volume == 1.0
    sink.volume = 0.25
    assert sink.volume == 0.25


def test_is_paused_follows_pause_and_play():
    sink, _ = Sink.new_idle()
    assert sink.is_paused is False
    sink.pause()
    assert sink.is_paused is True
    sink.play()
    assert sink.is_paused is False


def test_len_counts_queued_sounds():
    sink, queue_rx = Sink.new_idle()
    sink.append(SamplesBuffer(1, 1, [1]))
    sink.append(SamplesBuffer(1, 1, [2]))
    assert len(sink) == 2
    assert sink.empty() is False
    next(queue_rx)
    next(queue_rx)
    assert len(sink) == 1


def test_sleep_until_end_waits_for_last_sound():
    sink, queue_rx = Sink.new_idle()
    sink.append(SamplesBuffer(1, 1, [1, 2]))
    assert sink.sleep_until_end(timeout=0.01) is False
    next(queue_rx)
    next(queue_rx)
    assert next(queue_rx) == 0.0
    assert sink.sleep_until_end(timeout=1.0) is True


def test_close_stops_sounds_and_ends_queue():
    sink, queue_rx = Sink.new_idle()
    sink.append(SamplesBuffer(1, 1, VALUES))
    next(queue_rx)
    sink.close()
    assert list(queue_rx) == []


def test_detach_lets_sounds_finish():
    sink, queue_rx = Sink.new_idle()
    sink.append(SamplesBuffer(1, 1, [16384, -16384]))
    sink.detach()
    assert list(queue_rx) == [16384 / 32767, -0.5]


def test_context_manager_closes():
    sink, queue_rx = Sink.new_idle()
    with sink as entered:
        entered.append(SamplesBuffer(1, 1, VALUES))
    assert list(queue_rx) == []