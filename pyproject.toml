[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "excatch"
version = "0.1.0"
description = "Numbered exceptions with try/catch blocks, a per-thread handler stack and a termination handler"
requires-python = ">=3.10"
dependencies = []
keywords = ["exceptions", "try", "catch", "error-codes", "termination"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
excatch-demo = "excatch.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["excatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
