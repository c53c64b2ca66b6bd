[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nsnwork"
version = "0.1.0"
description = "Minecraft server-list-ping client, server configuration handling and noise-based terrain chunk generation"
requires-python = ">=3.11"
keywords = [
    "minecraft",
    "server-list-ping",
    "status",
    "terrain",
    "procedural-generation",
    "chunks",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
nsnwork-status = "nsnwork.client:main"

[tool.hatch.build.targets.wheel]
packages = ["nsnwork"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
