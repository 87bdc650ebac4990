[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "purgegame"
version = "1.0.0"
description = "Turn-based city survival game engine with builders, warriors, barricades and pluggable AI players"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "turn-based", "strategy", "ai", "simulation", "grid"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Turn Based Strategy",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
purgegame = "purgegame.cli:main"

[tool.setuptools.packages.find]
include = ["purgegame*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
