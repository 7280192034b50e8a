[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinyxmlkit"
version = "0.1.0"
description = "A small, self-contained XML document model with a forgiving parser, typed accessors and a pretty printer"
requires-python = ">=3.10"
dependencies = []
keywords = ["xml", "parser", "dom", "printer", "markup", "visitor"]
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
    "Topic :: Text Processing :: Markup :: XML",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tinyxmlkit"]

[tool.pytest.ini_options]
addopts = "-ra"
