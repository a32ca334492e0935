[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "navalbattle"
version = "0.1.0"
description = "A two-player naval battle game over TCP: line protocol, game rules, sessions and a pairing server"
requires-python = ">=3.10"
dependencies = []
keywords = ["battleship", "naval battle", "game", "board game", "server", "protocol", "tcp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
navalbattle-server = "navalbattle.server:main"

[tool.hatch.build.targets.wheel]
packages = ["navalbattle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
