[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "ircserver"
version = "0.1.0"
description = "A small single-process IRC server with channels, operators and invitations"
requires-python = ">=3.10"
dependencies = []
keywords = ["irc", "chat", "server", "socket", "select"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
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
ircserver = "ircserver.server:main"

[tool.setuptools.packages.find]
include = ["ircserver*"]

[tool.pytest.ini_options]
addopts = "-ra"
