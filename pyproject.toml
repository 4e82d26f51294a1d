[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fuseflow"
version = "0.1.0"
description = "Building blocks for a workflow engine: graph schemas, graphs with thread assignment, audit logs, a dot-notation key-value store, typed value parsing and a small HTTP client."
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["workflow", "graph", "orchestration", "key-value", "mermaid"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["fuseflow"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
