[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minircd"
version = "0.1.0"
description = "A small threaded chat server with nicknames and slash commands"
requires-python = ">=3.10"
dependencies = []
keywords = ["irc", "chat", "server", "tcp", "nickname"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat :: Internet Relay Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minircd = "minircd.server:main"

[tool.hatch.build.targets.wheel]
packages = ["minircd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
