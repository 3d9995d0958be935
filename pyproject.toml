[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diseasemonitor"
version = "0.1.0"
description = "Interactive monitor of patient records: current cases, frequencies and top-k diseases and countries."
requires-python = ">=3.10"
dependencies = []
keywords = ["epidemiology", "patient records", "hash table", "heap", "command line"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
diseasemonitor = "diseasemonitor.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["diseasemonitor"]

[tool.pytest.ini_options]
addopts = "-ra"
