[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kclick"
version = "0.1.0"
description = "Building blocks for an interactive Kubernetes shell: object listings, columns, completion, events, logs, exec and delete helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "kubectl", "cli", "shell", "pods", "cluster"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kclick"]

[tool.pytest.ini_options]
addopts = "-ra"
