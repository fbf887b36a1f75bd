"""Building the theme's CSS and the Java JAR files inside throw-away containers."""

from __future__ import annotations

import os
import posixpath
import subprocess
import tempfile
from pathlib import Path

from . import config
from .containers import CommandError, run


def less_argv(css_directory: str) -> list[str]:
    """Command that compiles main.less into main.css in the given directory."""
    return [
        "docker", "run", "--rm",
        "-v", f"{css_directory}:/src",
        config.LESS_IMAGE,
        config.LESS_INPUT_FILE, config.LESS_OUTPUT_FILE,
    ]


def compile_css(rtl: bool = False) -> None:
    """Compile the theme's LESS sources, or their right-to-left variant."""
    directory = config.css_dir(rtl)
    if not os.path.exists(directory):
        raise config.ConfigError(f"CSS directory does not exist: {directory}")
    run(less_argv(directory), error_message="Error compiling CSS")
    print(f"Successfully compiled CSS in {directory}")


def excluded_jar_grep_pattern() -> str:
    """Basic-regex alternation of the JAR names that are never built."""
    return config.EXCLUDED_JAR_PATTERNS.replace(" ", "\\|")


def _user_spec() -> str:
    getuid = getattr(os, "getuid", None)
    getgid = getattr(os, "getgid", None)
    uid = getuid() if getuid else 0
    gid = getgid() if getgid else 0
    return f"{uid}:{gid}"


def jar_build_argv(jar_file: str) -> list[str]:
    """Command that compiles one project under code/ and packs it into its JAR."""
    script = f"""
mkdir -p bin && \\
javac -cp "$(find /app -name '*.jar' | tr '\\n' ':')" -d bin $(find src -name '*.java') $(find {config.JAVA_SHARED_LIBRARIES_PATH} -name '*.java') && \\
jar cfm $(basename $(pwd)).jar META-INF/MANIFEST.MF -C bin . && \\
rm -rf bin
"""
    return [
        "docker", "run", "--rm",
        "-v", f"{config.aspen_clone_dir()}:/app",
        "-w", f"/app/code/{jar_file}",
        "--user", _user_spec(),
        config.JAVA_BUILD_IMAGE, "bash", "-c", script,
    ]


def _list_jars_script(packages: str, tail: str = "") -> str:
    return f"""
apk add --no-cache {packages} > /dev/null && \\
find /app/code -mindepth 2 -maxdepth 2 -name '*.jar' | grep -v "{excluded_jar_grep_pattern()}" | xargs -n 1 basename | sed 's/\\.jar$//'{tail}
"""


def jar_find_argv() -> list[str]:
    """Command that prints the name of every buildable JAR, one per line."""
    return [
        "docker", "run", "--rm",
        "-v", f"{config.aspen_clone_dir()}:/app",
        "-w", "/app",
        config.ALPINE_IMAGE, "sh", "-c", _list_jars_script("findutils"),
    ]


def _fzf_argv(container_output_path: str) -> list[str]:
    return [
        "docker", "run", "--rm", "-it",
        "-v", f"{config.aspen_clone_dir()}:/app",
        "-w", "/app",
        config.ALPINE_IMAGE, "sh", "-c",
        _list_jars_script("fzf findutils", f" | fzf > {container_output_path}"),
    ]


def parse_jar_list(output: str) -> list[str]:
    """JAR names from the listing command's output, blank lines dropped."""
    return [line for line in output.strip().split("\n") if line]


def build_jar(jar_file: str) -> None:
    """Recompile a single JAR file."""
    print(f"\n\033[1;34mRecompiling JAR file: {jar_file}\033[0m")
    run(jar_build_argv(jar_file), interactive=True,
        error_message=f"Error building JAR file {jar_file}")


def build_all_jars() -> list[str]:
    """Recompile every buildable JAR file; returns their names in build order."""
    try:
        result = subprocess.run(jar_find_argv(), capture_output=True, text=True)
    except OSError as exc:
        raise CommandError(f"Error finding JAR files: {exc}") from exc
    if result.returncode != 0:
        raise CommandError(
            f"Error finding JAR files: exit status {result.returncode}",
            result.returncode,
        )
    jars = parse_jar_list(result.stdout or "")
    for jar_file in jars:
        build_jar(jar_file)
    return jars


def build_single_jar() -> str:
    """Let the user pick one JAR with fzf and recompile it; returns its name."""
    clone_dir = config.aspen_clone_dir()
    try:
        handle, local_name = tempfile.mkstemp(prefix="fzf-output", dir=clone_dir)
    except OSError as exc:
        raise CommandError(f"Error creating temporary file: {exc}") from exc
    os.close(handle)
    output_file = Path(local_name)
    try:
        container_path = posixpath.join("/app", output_file.name)
        run(_fzf_argv(container_path), interactive=True,
            error_message="Error selecting JAR file with fzf")
        try:
            selected = (Path(clone_dir) / output_file.name).read_text().strip()
        except OSError as exc:
            raise CommandError(f"Error reading fzf output: {exc}") from exc
    finally:
        output_file.unlink(missing_ok=True)
    if not selected:
        raise CommandError("No JAR file selected.")
    build_jar(selected)
    return selected