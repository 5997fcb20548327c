[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tomlast"
version = "0.1.0"
description = "A low-level TOML parser that produces a syntax tree for each top-level expression and can keep comments."
requires-python = ">=3.10"
dependencies = []
keywords = ["toml", "parser", "ast", "syntax-tree", "comments"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Text Processing :: Markup",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tomlast"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
