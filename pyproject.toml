[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crateinspect"
version = "0.1.2"
description = "Terminal browser for the dependency tree of a Cargo project."
requires-python = ">=3.10"
keywords = ["cargo", "crates", "dependencies", "terminal", "inspector"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "blessed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
crateinspect = "crateinspect.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["crateinspect"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
