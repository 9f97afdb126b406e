[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smake"
version = "0.1.0"
description = "Core pieces of a make utility: macros, pattern rules, command-line options and start-up decisions"
requires-python = ">=3.10"
dependencies = []
keywords = ["make", "makefile", "build", "macros", "pattern rules", "makeflags"]
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
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["smake"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
