[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aspen-devbox"
version = "0.1.0"
description = "Command-line tool for managing the Aspen Discovery Docker development environment"
requires-python = ">=3.10"
keywords = ["aspen", "docker", "docker-compose", "development", "cli"]
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
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "pyyaml>=6.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
adb = "aspen_devbox.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["aspen_devbox"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
