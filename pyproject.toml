[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shiftfuzz"
version = "0.1.0"
description = "Move argument values and mutation strategies for fuzzing Move smart-contract functions"
requires-python = ">=3.10"
dependencies = []
keywords = ["fuzzing", "mutation", "move", "smart-contracts", "boundary-values"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["shiftfuzz"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
