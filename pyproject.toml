[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minishparse"
version = "0.1.0"
description = "Tokenizer, syntax checker, expander and redirection handling for a small shell command language"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "lexer", "parser", "tokenizer", "expansion", "heredoc", "redirection"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["minishparse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
