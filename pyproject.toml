[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metamorphic"
version = "0.1.0"
description = "A small game application framework: scenes, events, a headless window, logging and packed resource files."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "engine", "framework", "scenes", "events", "resources"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["metamorphic"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
