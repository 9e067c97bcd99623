"""WAV decoding and the format-detecting decoders built on it."""