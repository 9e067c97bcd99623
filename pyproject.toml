[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "audioflow"
version = "0.1.0"
description = "Composable audio sample streams: buffers, format, channel and rate conversion, mixing, queues, sinks and WAV decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "pcm", "resampling", "mixer", "wav", "samples"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["audioflow"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
