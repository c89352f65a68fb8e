[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentweave"
version = "0.1.0"
description = "Building blocks for agent systems: agent and topic identifiers, subscriptions, persistent agent state, and JSON and JSON Schema helpers."
requires-python = ">=3.10"
dependencies = [
    "jsonschema",
]
keywords = ["agents", "publish-subscribe", "topics", "subscriptions", "state", "json", "json-schema"]
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
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["agentweave"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
