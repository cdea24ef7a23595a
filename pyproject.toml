[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tasky"
version = "0.1.8"
description = "A personal to-do manager for the command line, backed by SQLite"
requires-python = ">=3.10"
keywords = ["todo", "tasks", "cli", "sqlite", "productivity"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Korean",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
    "Topic :: Utilities",
]
dependencies = [
    "wcwidth",
    "platformdirs",
    "tabulate",
    "termcolor",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tasky = "tasky.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tasky"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
