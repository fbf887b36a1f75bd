"""Pulling the compose project's images and bringing the project up."""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from pathlib import Path

import yaml

from . import config
from .containers import CommandError, run

SUPPORTED_ILS = ("koha", "evergreen")


def find_compose_files(root: str | os.PathLike[str]) -> Iterator[str]:
    """Every .yml file below root, in lexical walking order."""
    path = Path(root)
    if not path.is_dir():
        if path.name.endswith(".yml"):
            yield str(path)
        elif not path.exists():
            raise FileNotFoundError(f"no such file or directory: {path}")
        return
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            yield from find_compose_files(entry)
        elif entry.name.endswith(".yml"):
            yield str(entry)


def _load_mapping(text: str) -> dict:
    document = yaml.safe_load(text)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise yaml.YAMLError("document is not a mapping")
    return document


def compose_images(text: str) -> list[str]:
    """Images named by the services of a compose file.

    Services that are not mappings or name no image are skipped. Raises
    ValueError when the file defines no services.
    """
    services = _load_mapping(text).get("services")
    if not isinstance(services, dict):
        raise ValueError("does not define any services")
    return [
        service["image"]
        for service in services.values()
        if isinstance(service, dict) and isinstance(service.get("image"), str)
    ]


def required_images(text: str) -> list[str]:
    """Images of a compose file in which every service must name one."""
    services = _load_mapping(text).get("services")
    if not isinstance(services, dict):
        raise ValueError("No services found in docker-compose file")
    images = []
    for service in services.values():
        if not isinstance(service, dict):
            raise ValueError("Invalid service format in docker-compose file")
        image = service.get("image")
        if not isinstance(image, str):
            raise ValueError("No image name found for service in docker-compose file")
        images.append(image)
    return images


def pull_image(image: str) -> None:
    run(["docker", "pull", image], error_message=f"Error pulling image {image}")


def pull_all(root: str | os.PathLike[str] | None = None) -> list[str]:
    """Pull the images of every compose file below root; returns them in order."""
    if root is None:
        root = config.projects_dir()
    pulled = []
    try:
        for path in find_compose_files(root):
            try:
                text = Path(path).read_text()
            except OSError as exc:
                raise CommandError(f"Error reading Docker Compose file {path}: {exc}") from exc
            try:
                images = compose_images(text)
            except yaml.YAMLError as exc:
                raise CommandError(f"Error parsing Docker Compose file {path}: {exc}") from exc
            except ValueError:
                print(f"Warning: Docker Compose file {path} does not define any services")
                continue
            for image in images:
                print(f"Pulling image: {image}")
                pull_image(image)
                pulled.append(image)
    except OSError as exc:
        raise CommandError(f"Error scanning Docker Compose files: {exc}") from exc
    return pulled


def up_argv(
    aspen_docker: str,
    detached: bool = False,
    debugging: bool = False,
    dbgui: bool = False,
    ils: str = "koha",
) -> list[str]:
    """The docker compose command that brings the project up."""
    argv = ["docker", "compose", "-f", config.default_compose_file()]
    if debugging:
        argv += ["-f", config.debug_compose_file()]
    if dbgui:
        argv += ["-f", config.dbgui_compose_file()]
    if ils not in SUPPORTED_ILS:
        raise config.ConfigError(
            f"Unsupported ILS '{ils}'. Supported values: koha, evergreen"
        )
    override = os.path.join(aspen_docker, f"docker-compose.{ils}.yml")
    if not os.path.exists(override):
        label = "Koha" if ils == "koha" else "Evergreen"
        raise config.ConfigError(f"{label} override file not found at {override}")
    argv += ["-f", override, "up"]
    if detached:
        argv.append("-d")
    return argv


def compose_files_in(argv: Sequence[str]) -> list[str]:
    """The values given to -f options in a compose command line."""
    return [value for option, value in zip(argv, argv[1:]) if option == "-f"]


def _pull_required(compose_file: str) -> None:
    try:
        text = Path(compose_file).read_text()
    except OSError as exc:
        raise CommandError(f"Error reading docker-compose file: {exc}") from exc
    try:
        images = required_images(text)
    except yaml.YAMLError as exc:
        raise CommandError(f"Error parsing docker-compose file: {exc}") from exc
    except ValueError as exc:
        raise CommandError(str(exc)) from exc
    for image in images:
        pull_image(image)


def bring_up(
    detached: bool = False,
    debugging: bool = False,
    dbgui: bool = False,
    pull: bool = False,
    koha_stack: str = "",
    ils: str = "koha",
) -> None:
    """Bring up the compose project with the chosen ILS and extras."""
    aspen_docker = config.projects_dir()
    if ils == "koha" and koha_stack:
        os.environ["KOHA_STACK"] = koha_stack
    argv = up_argv(aspen_docker, detached, debugging, dbgui, ils)
    if pull:
        for compose_file in compose_files_in(argv):
            _pull_required(compose_file)
    run(argv, error_message="Error bringing up the project")