[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sctpwire"
version = "0.1.0"
description = "Encode and decode SCTP packets, chunks, parameters and error causes"
requires-python = ">=3.10"
dependencies = []
keywords = ["sctp", "networking", "protocol", "packet", "webrtc", "parser", "crc32c"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sctpwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
