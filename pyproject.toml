[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tilemap3d"
version = "0.1.0"
description = "Layered 3D tile maps: block grid model, terrain mesh generation and undoable map-building commands"
requires-python = ">=3.10"
dependencies = []
keywords = ["tilemap", "voxel", "level-editor", "terrain", "undo", "game-board"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tilemap3d"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
