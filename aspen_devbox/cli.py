"""The adb command line: manages the Aspen Discovery development environment."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from . import build, containers, images
from .config import ConfigError
from .containers import CommandError

DESCRIPTION = """\
Aspen Dev Box CLI is a command-line tool for managing the Aspen Discovery development environment.

This tool provides a comprehensive set of commands to:
- Manage Docker containers and services
- Build and compile code
- Access logs and databases
- And more...

For detailed information about each command, use 'adb <command> --help'."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adb",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>")

    css = commands.add_parser("compilecss", help="Compile CSS files")
    css.add_argument("-r", "--rtl", action="store_true",
                     help="Compile RTL (right-to-left) CSS files")
    css.set_defaults(handler=lambda args: build.compile_css(args.rtl))

    db = commands.add_parser("db", help="Opens the database shell")
    db.set_defaults(handler=lambda args: containers.open_db_shell())

    down = commands.add_parser("down", help="Bring down the Docker Compose project")
    down.set_defaults(handler=lambda args: containers.down())

    jars = commands.add_parser("jarbuild", help="Build Java JAR files")
    jars.add_argument("-a", "--all", action="store_true", help="Build all JAR files")
    jars.set_defaults(
        handler=lambda args: build.build_all_jars() if args.all else build.build_single_jar()
    )

    logs = commands.add_parser("logs", help="View container logs")
    logs.add_argument("-i", "--include-indexing", action="store_true",
                      help="Include indexing logs")
    logs.add_argument("-f", "--follow", action="store_true",
                      help="Follow logs in real-time")
    logs.set_defaults(
        handler=lambda args: containers.view_logs(args.include_indexing, args.follow)
    )

    mergejs = commands.add_parser("mergejs", help="Merge JavaScript files")
    mergejs.set_defaults(handler=lambda args: containers.merge_js())

    oauth = commands.add_parser("oauth", help="Update OAuth credentials")
    oauth.add_argument("client_id")
    oauth.add_argument("client_secret")
    oauth.add_argument("-d", "--driver", default="",
                       help="Specify the driver (default is 'Koha')")
    oauth.add_argument("-p", "--print", dest="show", action="store_true",
                       help="Print the rows that match the driver")
    oauth.set_defaults(handler=lambda args: containers.update_oauth(
        args.client_id, args.client_secret, args.driver, args.show))

    pull = commands.add_parser("pull", help="Pull Docker images")
    pull.set_defaults(handler=lambda args: images.pull_all())

    shell = commands.add_parser("shell", help="Open a shell inside the main container")
    shell.set_defaults(handler=lambda args: containers.open_shell())

    up = commands.add_parser("up", help="Bring up the Docker Compose project")
    up.add_argument("-d", "--detached", action="store_true", help="Run in detached mode")
    up.add_argument("-g", "--debugging", action="store_true",
                    help="Run with debugging compose file")
    up.add_argument("-b", "--dbgui", action="store_true", help="Run with dbgui compose file")
    up.add_argument("-p", "--pull", action="store_true",
                    help="Pull the images for the project only if they have been updated")
    up.add_argument("-k", "--koha-stack", default="",
                    help="Specify the Koha stack to connect to (default: kohadev)")
    up.add_argument("-i", "--ils", default="koha", help="Select ILS to use (koha|evergreen)")
    up.set_defaults(handler=lambda args: images.bring_up(
        args.detached, args.debugging, args.dbgui, args.pull, args.koha_stack, args.ils))

    updatedb = commands.add_parser("updatedb", help="Run database updates")
    updatedb.set_defaults(handler=lambda args: containers.update_db())

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0
    try:
        handler(args)
    except ConfigError as exc:
        print(f"Error: {exc}")
        return 1
    except CommandError as exc:
        print(exc)
        return 1
    return 0