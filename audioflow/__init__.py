"""Audio sample streams: buffers, format, channel and rate conversion, mixing, queues, sinks and WAV decoding."""

__version__ = "0.1.0"