import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from audioflow.sample_rate import SampleRateConverter
from audioflow.samples import SampleFormat

U16 = SampleFormat.U16
u16_lists = st.lists(st.integers(min_value=0, max_value=65535), max_size=64)
rates = st.integers(min_value=1, max_value=1_000_000)
channel_counts = st.integers(min_value=1, max_value=8)


def _whole_frames(values, channels):
    return values[: channels * (len(values) // channels)]


def _frames(values, channels):
    return [values[i : i + channels] for i in range(0, len(values), channels)]


@given(rates, rates, channel_counts)
def test_empty(from_rate, to_rate, channels):
    output = list(SampleRateConverter([], from_rate, to_rate, channels, U16))
    assert output == []


@given(rates, channel_counts, u16_lists)
def test_identity(from_rate, channels, values):
    output = list(SampleRateConverter(values, from_rate, from_rate, channels, U16))
    assert output == values


@settings(max_examples=200)
@given(
    st.integers(min_value=1, max_value=10000),
    st.integers(min_value=1, max_value=8),
    u16_lists,
    channel_counts,
)
def test_divide_sample_rate(to_rate, k, values, channels):
    values = _whole_frames(values, channels)
    from_rate = to_rate * k
    output = list(SampleRateConverter(values, from_rate, to_rate, channels, U16))
    expected = [s for frame in _frames(values, channels)[::k] for s in frame]
    assert output == expected


@settings(max_examples=200)
@given(
    st.integers(min_value=1, max_value=10000),
    st.integers(min_value=1, max_value=6),
    u16_lists,
    channel_counts,
)
def test_multiply_sample_rate(from_rate, k, values, channels):
    values = _whole_frames(values, channels)
    to_rate = from_rate * k
    output = list(SampleRateConverter(values, from_rate, to_rate, channels, U16))
    whole = [f for f in _frames(output, channels) if len(f) == channels]
    picked = [s for frame in whole[::k] for s in frame]
    assert picked == values


def test_upsample():
    values = [2, 16, 4, 18, 6, 20, 8, 22]
    output = SampleRateConverter(values, 2000, 3000, 2, U16)
    assert len(output) == 12
    assert list(output) == [2, 16, 3, 17, 4, 18, 6, 20, 7, 21, 8, 22]


@pytest.mark.parametrize(
    "from_rate,to_rate,channels", [(0, 44100, 1), (44100, 0, 1), (44100, 48000, 0)]
)
def test_invalid_arguments_rejected(from_rate, to_rate, channels):
    with pytest.raises(ValueError):
        SampleRateConverter([1, 2, 3], from_rate, to_rate, channels, U16)


def test_unknown_length_raises_on_len():
    converter = SampleRateConverter((x for x in [1, 2, 3]), 44100, 44100, 1, U16)
    assert converter.size_hint() == (0, None)
    with pytest.raises(TypeError):
        len(converter)


def test_same_rate_size_hint_follows_input():
    converter = SampleRateConverter([1, 2, 3, 4], 48000, 48000, 2, U16)
    assert converter.size_hint() == (4, 4)
    next(converter)
    assert len(converter) == 3


def test_into_inner_after_pass_through():
    converter = SampleRateConverter([9, 8, 7], 22050, 22050, 1, U16)
    assert next(converter) == 9
    assert list(converter.into_inner()) == [8, 7]


def test_float_samples_interpolate():
    output = list(
        SampleRateConverter([0.0, 1.0], 1, 2, 1, SampleFormat.F32)
    )
    assert output[0] == 0.0
    assert output[1] == pytest.approx(0.5)
    assert output[-1] == 1.0