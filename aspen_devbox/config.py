"""Settings for the Aspen Discovery development box: paths, container names, images."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_COMPOSE_FILE = "docker-compose.yml"
DEBUG_COMPOSE_FILE = "docker-compose.debug.yml"
DBGUI_COMPOSE_FILE = "docker-compose.dbgui.yml"

MAIN_CONTAINER_NAME = "containeraspen"
MAIN_CONTAINER_WORK_DIR = "/usr/local/aspen-discovery"
DB_CONTAINER_NAME = "aspen-db"
DB_NAME = "aspen"
DB_USER = "root"
LOG_PATH = "/var/log/aspen-discovery/test.localhostaspen/"

SUPPORTED_SHELLS = ("bash", "zsh", "fish")

JAVA_BUILD_IMAGE = "openjdk:11"
ALPINE_IMAGE = "alpine:latest"
JAVA_SHARED_LIBRARIES_PATH = "/app/code/java_shared_libraries"
EXCLUDED_JAR_PATTERNS = (
    "java_shared_libraries marcMergeUtility palace_project_export rbdigital_export"
)

JS_WORK_DIR = "/usr/local/aspen-discovery/code/web/interface/themes/responsive/js"
MERGE_JS_SCRIPT = "merge_javascript.php"

CSS_BASE_DIR = "/code/web/interface/themes/responsive/css"
CSS_RTL_SUFFIX = "-rtl"
LESS_IMAGE = "ghcr.io/sndsgd/less"
LESS_INPUT_FILE = "main.less"
LESS_OUTPUT_FILE = "main.css"


class ConfigError(Exception):
    """Raised when the environment does not describe a usable dev box."""


def _binary_dir() -> Path:
    script = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not script:
        return Path.cwd()
    return Path(script).resolve().parent


def load_env_file() -> bool:
    """Load the .env file two levels above the program's directory.

    The program lives in <root>/bin/<architecture>/, the .env file in <root>/.
    Variables already set in the environment are kept. Returns whether a
    file was found; a missing file is not an error.
    """
    env_path = _binary_dir().parent.parent / ".env"
    if not env_path.is_file():
        return False
    try:
        load_dotenv(env_path, override=False)
    except OSError as exc:
        raise ConfigError(f"error loading .env file: {exc}") from exc
    return True


def _required_env(name: str) -> str:
    try:
        load_env_file()
    except ConfigError:
        pass
    value = os.environ.get(name, "")
    if not value:
        raise ConfigError(f"{name} environment variable not set.")
    return value


def projects_dir() -> str:
    """The ASPEN_DOCKER directory, taken from the environment or the .env file."""
    return _required_env("ASPEN_DOCKER")


def aspen_clone_dir() -> str:
    """The ASPEN_CLONE directory, taken from the environment or the .env file."""
    return _required_env("ASPEN_CLONE")


def _join(base: str, *parts: str) -> str:
    relative = [part.lstrip("/") for part in parts]
    return os.path.normpath(os.path.join(base, *relative))


def compose_file_path(filename: str) -> str:
    """Full path of a docker-compose file inside the projects directory."""
    return _join(projects_dir(), filename)


def default_compose_file() -> str:
    return compose_file_path(DEFAULT_COMPOSE_FILE)


def debug_compose_file() -> str:
    return compose_file_path(DEBUG_COMPOSE_FILE)


def dbgui_compose_file() -> str:
    return compose_file_path(DBGUI_COMPOSE_FILE)


def db_connection_string() -> str:
    """Command-line arguments that connect the mariadb client to the Aspen database."""
    # The development database uses its own name as the root password.
    return f"-u{DB_USER} -p{DB_NAME} {DB_NAME}"


def validate_shell(shell: str) -> bool:
    """Whether completions can be installed for the given shell."""
    return shell in SUPPORTED_SHELLS


def css_dir(rtl: bool) -> str:
    """Directory holding the theme's LESS sources, or its right-to-left variant."""
    directory = _join(aspen_clone_dir(), CSS_BASE_DIR)
    if rtl:
        directory += CSS_RTL_SUFFIX
    return directory