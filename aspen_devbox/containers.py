"""Commands that act on the running dev-box containers."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from . import config

UPDATE_DB_COMMAND = "curl -k http://localhost/API/SystemAPI?method=runPendingDatabaseUpdates"
DEFAULT_OAUTH_DRIVER = "Koha"


class CommandError(Exception):
    """Raised when an external command cannot be started or fails."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


def run(
    argv: Sequence[str],
    cwd: str | None = None,
    interactive: bool = False,
    error_message: str = "Error running command",
) -> None:
    """Run a command with the terminal's output streams.

    Interactive commands also get the terminal's input; others read nothing.
    """
    stdin = None if interactive else subprocess.DEVNULL
    try:
        result = subprocess.run(list(argv), cwd=cwd, stdin=stdin)
    except OSError as exc:
        raise CommandError(f"{error_message}: {exc}") from exc
    if result.returncode != 0:
        raise CommandError(
            f"{error_message}: exit status {result.returncode}", result.returncode
        )


def db_shell_argv() -> list[str]:
    return [
        "docker", "exec", "-it", config.DB_CONTAINER_NAME,
        "/bin/bash", "-c", "mariadb " + config.db_connection_string(),
    ]


def down_argv() -> list[str]:
    return [
        "docker", "compose", "-f", config.default_compose_file(),
        "down", "--remove-orphans",
    ]


def logs_argv(include_indexing: bool = False, follow: bool = False) -> list[str]:
    pattern = "./*"
    if include_indexing:
        pattern += " ./logs/*"
    tail = "tail -f" if follow else "tail"
    return [
        "docker", "exec", "-it", config.MAIN_CONTAINER_NAME,
        "/bin/bash", "-c", f"(cd {config.LOG_PATH}; {tail} {pattern})",
    ]


def mergejs_argv() -> list[str]:
    return [
        "docker", "exec", "-w", config.JS_WORK_DIR, config.MAIN_CONTAINER_NAME,
        "php", config.MERGE_JS_SCRIPT,
    ]


def shell_argv() -> list[str]:
    return [
        "docker", "exec", "-itw", config.MAIN_CONTAINER_WORK_DIR,
        config.MAIN_CONTAINER_NAME, "/bin/bash",
    ]


def updatedb_argv() -> list[str]:
    return [
        "docker", "exec", "-it", config.MAIN_CONTAINER_NAME,
        "/bin/bash", "-c", UPDATE_DB_COMMAND,
    ]


def oauth_sql(
    client_id: str, client_secret: str, driver: str | None = None, show: bool = False
) -> str:
    """SQL that stores OAuth credentials for a driver and reports the rows changed."""
    driver = driver or DEFAULT_OAUTH_DRIVER
    sql = (
        "\nSET @update_count = 0;\n"
        "UPDATE account_profiles\n"
        f"SET oAuthClientId='{client_id}',\n"
        f"oAuthClientSecret='{client_secret}'\n"
        f"WHERE driver='{driver}';\n"
        "SET @update_count = ROW_COUNT();\n"
        "\n"
        "SELECT @update_count as Changed_Rows;\n"
    )
    if show:
        sql += f"\nSELECT * FROM account_profiles\nWHERE driver='{driver}'\n"
    return sql


def oauth_argv(
    client_id: str, client_secret: str, driver: str | None = None, show: bool = False
) -> list[str]:
    sql = oauth_sql(client_id, client_secret, driver, show)
    return [
        "docker", "exec", "-it", config.DB_CONTAINER_NAME,
        "/bin/bash", "-c", f'echo "{sql}" | mariadb {config.db_connection_string()}',
    ]


def open_db_shell() -> None:
    """Open an interactive MariaDB shell on the Aspen database."""
    run(db_shell_argv(), cwd=config.projects_dir(), interactive=True,
        error_message="Error opening database shell")


def down() -> None:
    """Stop and remove the compose project's containers, orphans included."""
    run(down_argv(), error_message="Error bringing down the project")


def view_logs(include_indexing: bool = False, follow: bool = False) -> None:
    """Show the main container's logs, optionally following them."""
    run(logs_argv(include_indexing, follow), cwd=config.projects_dir(),
        interactive=True, error_message="Error viewing logs")


def merge_js() -> None:
    """Combine and minify the theme's JavaScript inside the main container."""
    run(mergejs_argv(),
        error_message="Error running the merge_javascript.php command")


def open_shell() -> None:
    """Open a bash shell in the main container's Aspen directory."""
    run(shell_argv(), cwd=config.projects_dir(), interactive=True,
        error_message="Error opening a shell in the container")


def update_db() -> None:
    """Trigger pending database updates through the system API."""
    run(updatedb_argv(), cwd=config.projects_dir(), interactive=True,
        error_message="Error running database updates")
    print("Database updates completed successfully")


def update_oauth(
    client_id: str, client_secret: str, driver: str | None = None, show: bool = False
) -> None:
    """Store OAuth credentials for ILS logins in the database."""
    run(oauth_argv(client_id, client_secret, driver, show), interactive=True,
        error_message="Error updating OAuth credentials")