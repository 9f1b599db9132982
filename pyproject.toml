[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coralsea"
version = "0.1.0"
description = "Ocean scene data for underwater visualisation: weather moods, scene parameters, shaders, wave tiles, trochoid waves, silt particles and model discovery."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["ocean", "underwater", "simulation", "visualization", "waves", "shaders", "particles"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["coralsea"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
