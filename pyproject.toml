[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oaiclient"
version = "0.1.0"
description = "Client for an assistants-style HTTP API: threads, runs, vector stores, moderation, speech, plus a server-sent event stream reader."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "api",
    "client",
    "assistants",
    "threads",
    "runs",
    "vector-stores",
    "moderation",
    "speech",
    "server-sent-events",
    "rate-limit",
]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oaiclient"]

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
