[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asionet"
version = "0.1.0"
description = "Asyncio networking pieces: chat framing, SOCKS4 wire format, a TCP echo server, a TLS demo and an in-memory TLS engine."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "asyncio",
    "networking",
    "chat",
    "echo-server",
    "socks4",
    "tls",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
asionet-tcp-echo = "asionet.tcp_echo:main"
asionet-ssl-demo = "asionet.ssl_demo:main"

[tool.hatch.build.targets.wheel]
packages = ["asionet"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
