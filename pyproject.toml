[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arwen"
version = "0.1.0"
description = "Lexer configuration, token handling and LL(1) grammar analysis, with logging and error helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["lexer", "tokens", "grammar", "LL(1)", "first sets", "follow sets", "parse table"]
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
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["arwen"]

[tool.pytest.ini_options]
addopts = "-ra"
