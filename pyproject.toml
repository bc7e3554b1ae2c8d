[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentteam"
version = "0.1.0"
description = "Configuration, instruction resolution and diagnostics for a team of coding agents running in terminal sessions"
requires-python = ">=3.10"
dependencies = []
keywords = ["agents", "configuration", "instructions", "diagnostics", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
agentteam = "agentteam.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["agentteam"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
