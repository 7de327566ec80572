[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatlog"
version = "0.1.0"
description = "Data models for chat history database records, plus the state behind a terminal browsing interface"
requires-python = ">=3.10"
keywords = ["chat", "chatlog", "messages", "contacts", "sessions", "xml", "protobuf"]
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
    "Topic :: Communications :: Chat",
]
dependencies = [
    "zstandard",
    "lz4",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chatlog"]

[tool.pytest.ini_options]
addopts = "-ra"
