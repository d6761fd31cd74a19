[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "logmancer"
version = "0.2.0"
description = "Page through, tail and regex-filter very large log files from a terminal, an HTTP JSON API or Python code."
requires-python = ">=3.10"
keywords = ["log", "viewer", "tail", "filter", "regex", "large-files", "tui", "mmap"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Topic :: Internet :: Log Analysis",
]
dependencies = [
    "aiohttp>=3.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
    "responses>=0.25",
]

[project.scripts]
logmancer-server = "logmancer.server:main"
logmancer-tui = "logmancer.tui:main"

[tool.hatch.build.targets.wheel]
packages = ["logmancer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
