[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "c300sim"
version = "1.0.0"
description = "Cycle-level behavioural models of a many-core hashing chip: cores, TMR voting, engine, buffers, scheduling, control and network QoS"
requires-python = ">=3.10"
dependencies = []
keywords = ["simulation", "hardware", "behavioural-model", "tmr", "scheduler", "qos", "eda"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["c300sim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
