import os
import subprocess
import sys

import pytest

from aspen_devbox import config, containers


@pytest.fixture(autouse=True)
def env(tmp_path, monkeypatch):
    binary = tmp_path / "bin" / "arch" / "adb"
    binary.parent.mkdir(parents=True)
    binary.write_text("")
    monkeypatch.setattr(sys, "argv", [str(binary)])
    monkeypatch.setenv("ASPEN_DOCKER", str(tmp_path))
    yield tmp_path
    os.environ.pop("ASPEN_DOCKER", None)


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake_run(argv, **kwargs):
        recorded.append((argv, kwargs))
        return subprocess.CompletedProcess(argv, 0)

    monkeypatch.setattr(containers.subprocess, "run", fake_run)
    return recorded


@pytest.fixture
def failing(monkeypatch):
    def fake_run(argv, **kwargs):
        return subprocess.CompletedProcess(argv, 3)

    monkeypatch.setattr(containers.subprocess, "run", fake_run)


def test_run_interactive_inherits_stdin(calls):
    expected = containers.shell_argv()
    containers.run(expected, cwd="/somewhere", interactive=True)
    argv, kwargs = calls[0]
    assert argv == containers.shell_argv()
    assert argv[:3] == ["docker", "exec", "-itw"]
    assert kwargs["stdin"] is None
    assert kwargs["cwd"] == "/somewhere"


def test_run_non_interactive_reads_nothing(calls):
    expected = containers.mergejs_argv()
    containers.run(expected)
    argv, kwargs = calls[0]
    assert argv == containers.mergejs_argv()
    assert argv[-2:] == ["php", config.MERGE_JS_SCRIPT]
    assert kwargs["stdin"] == subprocess.DEVNULL


def test_run_failure_raises_with_status(failing):
    with pytest.raises(containers.CommandError) as info:
        containers.run(["false"], error_message="Error doing it")
    assert info.value.returncode == 3
    assert str(info.value) == "Error doing it: exit status 3"


def test_run_missing_program_raises(monkeypatch):
    def fake_run(argv, **kwargs):
        raise FileNotFoundError(2, "No such file", argv[0])

    monkeypatch.setattr(containers.subprocess, "run", fake_run)
    with pytest.raises(containers.CommandError, match="Error starting"):
        containers.run(["docker"], error_message="Error starting")


def test_db_shell_argv():
    argv = containers.db_shell_argv()
    assert argv[:4] == ["docker", "exec", "-it", config.DB_CONTAINER_NAME]
    assert argv[-1] == "mariadb " + config.db_connection_string()


def test_down_argv_uses_default_compose_file(env):
    argv = containers.down_argv()
    assert argv == [
        "docker", "compose", "-f", str(env / config.DEFAULT_COMPOSE_FILE),
        "down", "--remove-orphans",
    ]


def test_logs_argv_plain():
    argv = containers.logs_argv()
    assert argv[3] == config.MAIN_CONTAINER_NAME
    assert argv[-1].startswith(f"(cd {config.LOG_PATH}; ")
    assert argv[-1].endswith("tail ./*)")


@pytest.mark.parametrize("include_indexing", [False, True])
@pytest.mark.parametrize("follow", [False, True])
def test_logs_argv_flags(include_indexing, follow):
    command = containers.logs_argv(include_indexing, follow)[-1]
    assert ("tail -f" in command) is follow
    assert ("./logs/*" in command) is include_indexing


def test_mergejs_argv():
    argv = containers.mergejs_argv()
    assert argv[3] == config.JS_WORK_DIR
    assert argv[-2:] == ["php", config.MERGE_JS_SCRIPT]


def test_shell_argv():
    assert containers.shell_argv() == [
        "docker", "exec", "-itw", config.MAIN_CONTAINER_WORK_DIR,
        config.MAIN_CONTAINER_NAME, "/bin/bash",
    ]


def test_updatedb_argv_calls_system_api():
    argv = containers.updatedb_argv()
    assert argv[-1] == containers.UPDATE_DB_COMMAND
    assert "runPendingDatabaseUpdates" in argv[-1]


def test_oauth_sql_defaults_to_koha():
    sql = containers.oauth_sql("client-1", "secret")
    assert "oAuthClientId='client-1'" in sql
    assert "oAuthClientSecret='secret'" in sql
    assert "WHERE driver='Koha';" in sql
    assert "SELECT * FROM account_profiles" not in sql


def test_oauth_sql_custom_driver_with_show():
    sql = containers.oauth_sql("client-1", "secret", "Evergreen", show=True)
    assert sql.count("driver='Evergreen'") == 2
    assert "Koha" not in sql
    assert "SELECT * FROM account_profiles" in sql


def test_oauth_argv_pipes_sql_to_mariadb():
    argv = containers.oauth_argv("client-1", "secret")
    command = argv[-1]
    assert argv[3] == config.DB_CONTAINER_NAME
    assert command.startswith('echo "' + containers.oauth_sql("client-1", "secret"))
    assert command.endswith("| mariadb " + config.db_connection_string())


def test_open_db_shell_runs_in_projects_dir(calls, env):
    containers.open_db_shell()
    argv, kwargs = calls[0]
    assert argv == containers.db_shell_argv()
    assert kwargs["cwd"] == str(env)
    assert kwargs["stdin"] is None


def test_down_is_not_interactive(calls):
    containers.down()
    argv, kwargs = calls[0]
    assert argv == containers.down_argv()
    assert kwargs["stdin"] == subprocess.DEVNULL


def test_view_logs_passes_flags(calls):
    containers.view_logs(include_indexing=True, follow=True)
    assert calls[0][0] == containers.logs_argv(True, True)


def test_merge_js_failure_message(failing):
    with pytest.raises(containers.CommandError, match="merge_javascript.php"):
        containers.merge_js()


def test_open_shell_runs_shell_argv(calls):
    containers.open_shell()
    assert calls[0][0] == containers.shell_argv()


def test_update_db_reports_success(calls, capsys):
    containers.update_db()
    assert calls[0][0] == containers.updatedb_argv()
    assert "Database updates completed successfully" in capsys.readouterr().out


def test_update_db_failure_prints_nothing(failing, capsys):
    with pytest.raises(containers.CommandError, match="Error running database updates"):
        containers.update_db()
    assert "completed" not in capsys.readouterr().out


def test_update_oauth_runs_interactively(calls):
    containers.update_oauth("client-1", "secret", "Koha", show=True)
    argv, kwargs = calls[0]
    assert argv == containers.oauth_argv("client-1", "secret", "Koha", True)
    assert kwargs["stdin"] is None


def test_missing_projects_dir_stops_before_running(calls, monkeypatch):
    monkeypatch.delenv("ASPEN_DOCKER")
    with pytest.raises(config.ConfigError):
        containers.open_shell()
    assert calls == []