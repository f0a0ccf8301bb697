[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "httpfromtcp"
version = "0.1.0"
description = "A small HTTP/1.1 server built directly on TCP sockets, with an incremental request parser and a response writer."
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "http/1.1", "tcp", "udp", "server", "parser", "chunked", "sockets"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: System :: Networking",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
httpfromtcp-server = "httpfromtcp.httpserver:main"
httpfromtcp-tcplistener = "httpfromtcp.tcplistener:main"
httpfromtcp-udpsender = "httpfromtcp.udpsender:main"

[tool.hatch.build.targets.wheel]
packages = ["httpfromtcp"]

[tool.hatch.build.targets.sdist]
include = ["httpfromtcp", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
files = ["httpfromtcp"]
