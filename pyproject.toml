[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dumbthieves"
version = "0.1.0"
description = "Simulation of thieves competing for houses and fences with Lamport-clock mutual exclusion"
requires-python = ">=3.10"
dependencies = []
keywords = ["lamport", "mutual-exclusion", "distributed", "simulation", "ricart-agrawala"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dumbthieves = "dumbthieves.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dumbthieves"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
