[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dagsched"
version = "0.1.0"
description = "Building blocks for schedulability analysis of real-time DAG tasks: sub-tasks, series-parallel decomposition trees, DOT line parsing and result plotting."
requires-python = ">=3.10"
keywords = ["real-time", "scheduling", "dag", "schedulability", "series-parallel"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "matplotlib",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dagsched"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
