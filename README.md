# audioflow

Audio sample streams you can build, convert and combine in plain Python,
with no dependencies outside the standard library.

A *source* (`audioflow.source.Source`) is an iterator of interleaved samples
that also reports its `channels`, `sample_rate` and `sample_format`, and,
where known, its `total_duration` (a `datetime.timedelta`) and
`current_frame_len`. Every source has `size_hint()`, returning
`(lower, upper)` bounds on the samples left, and `convert_samples(target)`,
returning a source that yields the same samples in another format.

## What is in the package

- `audioflow.samples`
  - `SampleFormat` – an enum of `I16`, `U16` and `F32` with `lerp`,
    `amplify`, `saturating_add`, `zero_value` and `convert`.
  - `DataConverter` – an iterator that converts each sample from one format
    to another.
- `audioflow.channels.ChannelCountConverter` – changes the channel count of
  an interleaved stream. Extra input channels are dropped; extra output
  channels repeat the last input channel of the frame.
- `audioflow.sample_rate.SampleRateConverter` – changes the sample rate by
  linear interpolation between neighbouring frames.
- `audioflow.buffer.SamplesBuffer` – a list of samples treated as a source.
  Zero channels or a zero sample rate raise `ValueError`.
- `audioflow.dynamic_mixer.mixer(channels, sample_rate, sample_format)` –
  returns a `DynamicMixerController` and a `DynamicMixer`. Sources added to
  the controller are converted to the mixer's channels, rate and format and
  summed (with saturation for integer formats) in the output. The output ends
  when no sources are left playing.
- `audioflow.queue.queue(keep_alive_if_empty, sample_format)` – returns a
  `SourcesQueueInput` and a `SourcesQueueOutput`. Appended sources play one
  after another. With `keep_alive_if_empty` the output yields silence while
  nothing is queued; otherwise it ends. `append_with_signal` returns a
  `threading.Event` that is set when that sound has finished. Appending a
  source whose format differs from the queue's raises `ValueError`.
- `audioflow.sink.Sink` – a controllable track built on a queue of `F32`
  samples, with `append`, `play`, `pause`, `is_paused`, `stop`, a `volume`
  property, `len(sink)`, `empty()`, `sleep_until_end(timeout=None)`,
  `close()` and `detach()`. A sink is also a context manager: leaving the
  `with` block closes it, which stops its sounds unless it was detached.
- `audioflow.decoder.wav` – `WavDecoder`, `is_wave` and the helpers
  `f32_to_i16`, `i8_to_i16`, `i24_to_i16`, `i32_to_i16`. It reads RIFF WAVE
  data with 8, 16, 24 or 32-bit integer samples or 32-bit float samples and
  yields 16-bit integers.
- `audioflow.decoder.core` – `Decoder`, `LoopedDecoder`, `DecoderError` and
  the `Mp4Type` enum. `Decoder(stream)` and `Decoder.new_wav(stream)` decode
  a binary stream; `Decoder.new_looped(stream)` returns a `LoopedDecoder`
  that rewinds the stream and starts over each time it reaches the end.

## Examples

Mixing two buffers:

```python
from audioflow.buffer import SamplesBuffer
from audioflow.dynamic_mixer import mixer
from audioflow.samples import SampleFormat

controller, output = mixer(1, 48000, SampleFormat.I16)
controller.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], SampleFormat.I16))
controller.add(SamplesBuffer(1, 48000, [5, 5, 5, 5], SampleFormat.I16))

print(list(output))  # [15, -5, 15, -5]
```

Changing the channel count and sample rate of raw samples:

```python
from audioflow.channels import ChannelCountConverter
from audioflow.sample_rate import SampleRateConverter

print(list(ChannelCountConverter([1, 2, 1, 2], 2, 3)))  # [1, 2, 2, 1, 2, 2]
print(list(SampleRateConverter([2, 16, 4, 18, 6, 20, 8, 22], 2000, 3000, 2)))
# [2, 16, 3, 17, 4, 18, 6, 20, 7, 21, 8, 22]
```

Decoding a WAV file:

```python
from audioflow.decoder.core import Decoder

with open("sound.wav", "rb") as fh:
    decoder = Decoder(fh)
    print(decoder.channels, decoder.sample_rate, decoder.total_duration)
    samples = list(decoder)
```

A sink's output side is an ordinary source you pull samples from:

```python
from audioflow.buffer import SamplesBuffer
from audioflow.samples import SampleFormat
from audioflow.sink import Sink

sink, output = Sink.new_idle()
sink.append(SamplesBuffer(1, 1, [10, -10, 20], SampleFormat.I16))
sink.volume = 0.5
first = next(output)  # 10 at half volume, as an f32 sample
```

## What the package does not do

- It does not play sound. There is no connection to an audio device: a
  `Sink`, queue or mixer only produces samples, and something else has to
  pull them from the output source and send them to a device.
- It decodes WAV only. Other data makes `Decoder` raise `DecoderError`;
  there are no FLAC, Vorbis, MP3 or MP4 decoders, and `Mp4Type` only names
  the MP4 family of extensions.
- WAV integer samples at bit depths other than 8, 16, 24 and 32 are
  recognised but raise `ValueError` when read.

## Running the tests

```
pip install -e ".[test]"
pytest
```