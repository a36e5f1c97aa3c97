[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stkdv"
version = "0.1.0"
description = "Spatio-temporal kernel density estimation over regular grids with sliding-window, prefix-set and tree-based algorithms"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "kernel density estimation",
    "spatio-temporal",
    "STKDV",
    "hotspot",
    "visualization",
    "sliding window",
    "kd-tree",
    "ball tree",
]
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
    "Topic :: Scientific/Engineering :: Visualization",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
stkdv-compress = "stkdv.compress:main"

[tool.hatch.build.targets.wheel]
packages = ["stkdv"]

[tool.pytest.ini_options]
addopts = "-ra"
