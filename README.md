# aspen-devbox

`adb` is a command-line tool for managing an Aspen Discovery development
environment that runs under Docker Compose. It starts and stops the stack,
opens shells and database consoles inside the containers, tails the logs,
builds the Java JAR files, compiles the LESS stylesheets and merges the
JavaScript files. Every action is carried out by running `docker`.

## Installation

```
pip install .
```

Docker, with the `compose` plugin, must be on your `PATH`.

## Configuration

Two environment variables are used:

- `ASPEN_DOCKER` – the directory holding the `docker-compose*.yml` files.
- `ASPEN_CLONE` – your checkout of the Aspen Discovery source.

Before either is read, `adb` looks for a `.env` file two directories above
the directory holding the running program (for a program installed as
`<root>/bin/<architecture>/adb`, that is `<root>/.env`) and loads it.
Variables already set in the environment take precedence over the file.
A command that needs a variable that is still unset stops with
`Error: ASPEN_DOCKER environment variable not set.` (or the same for
`ASPEN_CLONE`).

## Usage

```
adb up [-d] [-g] [-b] [-p] [-k STACK] [-i koha|evergreen]
adb down
adb pull
adb shell
adb db
adb logs [-i] [-f]
adb updatedb
adb oauth CLIENT_ID CLIENT_SECRET [-d DRIVER] [-p]
adb mergejs
adb compilecss [-r]
adb jarbuild [-a]
```

| Command      | What it does |
|--------------|--------------|
| `up`         | Runs `docker compose ... up` with `docker-compose.yml` from `ASPEN_DOCKER`, plus `docker-compose.debug.yml` with `-g/--debugging`, `docker-compose.dbgui.yml` with `-b/--dbgui`, and `docker-compose.koha.yml` or `docker-compose.evergreen.yml` chosen by `-i/--ils` (default `koha`; the override file must exist). `-d/--detached` adds `-d`. `-k/--koha-stack` sets `KOHA_STACK` for a Koha stack. `-p/--pull` first pulls the image of every service in each of those compose files; every service must name an image. |
| `down`       | Runs `docker compose -f docker-compose.yml down --remove-orphans`. |
| `pull`       | Walks `ASPEN_DOCKER` and pulls every image named by a service in each `.yml` file found; files without services are reported with a warning and skipped. |
| `shell`      | Opens a bash shell in the `containeraspen` container, in `/usr/local/aspen-discovery`. |
| `db`         | Opens a MariaDB shell on the `aspen` database in the `aspen-db` container. |
| `logs`       | Runs `tail` on the site logs in the main container; `-i/--include-indexing` adds the indexing logs, `-f/--follow` follows them. |
| `updatedb`   | Calls the SystemAPI `runPendingDatabaseUpdates` method inside the main container. |
| `oauth`      | Sets `oAuthClientId` and `oAuthClientSecret` in `account_profiles` for a driver (`-d/--driver`, default `Koha`) and reports the number of rows changed; `-p/--print` also selects the matching rows. The values are placed in the SQL as given, without escaping. |
| `mergejs`    | Runs `php merge_javascript.php` in the theme's `js` directory of the main container. |
| `compilecss` | Compiles `main.less` into `main.css` in the theme's `css` directory of `ASPEN_CLONE` (the `css-rtl` directory with `-r/--rtl`) using the `ghcr.io/sndsgd/less` image. |
| `jarbuild`   | Builds one JAR, picked interactively with `fzf` inside an Alpine container, or with `-a/--all` every JAR under `code/`, except the shared libraries, `marcMergeUtility`, `palace_project_export` and `rbdigital_export`. Builds run in an `openjdk:11` container as the current user. |

Run `adb --help` or `adb <command> --help` for details. With no command,
`adb` prints its help. A command that fails prints an error and exits with
status 1.

## Use from Python

The same operations are available as functions:

- `aspen_devbox.containers`: `down`, `open_shell`, `open_db_shell`,
  `view_logs`, `update_db`, `update_oauth`, `merge_js`, and the matching
  `*_argv` functions that return the `docker` command line without running
  it, plus `oauth_sql`. Failures raise `CommandError`.
- `aspen_devbox.build`: `compile_css`, `build_jar`, `build_all_jars`,
  `build_single_jar`, `less_argv`, `jar_build_argv`, `jar_find_argv`,
  `parse_jar_list`.
- `aspen_devbox.images`: `bring_up`, `up_argv`, `pull_all`, `pull_image`,
  `find_compose_files`, `compose_images`, `required_images`,
  `compose_files_in`.
- `aspen_devbox.config`: paths, container names and images, and
  `ConfigError` for a missing or unusable setting.

## What it does not do

`adb` has no command for installing shell completions.
`config.validate_shell` only reports whether a shell is `bash`, `zsh` or
`fish`.

## Running the tests

```
pip install .[test]
pytest
```