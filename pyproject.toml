[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stromlinger"
version = "0.1.0"
description = "Serial telemetry link for an electric vehicle dashboard: packet framing, CRC16 checking and decoded gauge values"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["serial", "telemetry", "crc16", "dashboard", "esc", "motor-controller"]
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
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["stromlinger"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
