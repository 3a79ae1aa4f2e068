[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "serialbridge"
version = "0.1.0"
description = "Barker-framed UART and SPI links with cyclic element and bit buffers"
requires-python = ">=3.10"
dependencies = []
keywords = ["uart", "spi", "serial", "framing", "ring buffer", "cyclic buffer", "bit buffer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
serialbridge = "serialbridge.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["serialbridge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
