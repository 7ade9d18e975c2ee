[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kubeview"
version = "0.1.0"
description = "Terminal rendering helpers for a Kubernetes fleet dashboard: ANSI-aware cells, table rows, a log viewer and confirm dialogs"
requires-python = ">=3.10"
dependencies = [
    "wcwidth",
]
keywords = ["kubernetes", "terminal", "tui", "ansi", "dashboard", "logs"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kubeview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
