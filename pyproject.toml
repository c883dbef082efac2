[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mimefold"
version = "0.1.0"
description = "Helpers for locating, folding, unfolding and quoting RFC 5322 mail header fields"
requires-python = ">=3.10"
dependencies = []
keywords = ["email", "mime", "rfc5322", "header", "folding", "quoting", "bidi"]
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
    "Topic :: Communications :: Email",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["mimefold"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
