[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "docserve"
version = "0.1.0"
description = "Core logic for a documentation hosting service: version matching, release ordering, feature trees, page rewriting and build-queue helpers"
requires-python = ">=3.10"
dependencies = [
    "markdown-it-py",
]
keywords = [
    "documentation",
    "hosting",
    "semver",
    "markdown",
    "build-queue",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Software Development :: Documentation",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["docserve"]

[tool.hatch.build.targets.sdist]
include = [
    "docserve",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
