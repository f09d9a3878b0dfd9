[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hearthweb"
version = "1.0.0"
description = "Building blocks for a small threaded HTTP server: request parsing, routing, connection tracking, pools, logging, compression and colour output."
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "router", "thread-pool", "logging", "compression", "config"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hearthweb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
