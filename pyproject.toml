[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "phytofsm"
version = "0.7.0"
description = "Build validated hierarchical finite state machines from UML state diagram descriptions and run them against your own actions"
requires-python = ">=3.10"
dependencies = []
keywords = ["fsm", "state-machine", "uml", "statechart", "hierarchical-state-machine"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["phytofsm"]

[tool.hatch.build.targets.sdist]
include = ["phytofsm", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
