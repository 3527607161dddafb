from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from .commands import CommandRunner, run_command
from .models import ProjectInfo, ResolvedProject
from .utils import logger

MANIFEST_FILENAME = "package.json"
GIT_CONFIG_PATH = Path(".git") / "config"
CWD_LOOKUP_TIMEOUT = 1.0

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class DirectoryRule:
    """A named pattern whose first group captures a project root."""

    name: str
    pattern: re.Pattern[str]

    def match(self, command: str) -> Optional[str]:
        found = self.pattern.search(command)
        if not found:
            return None
        return _clean_path(found.group(1))


# Explicit directory flags come before launcher and build-output paths.
DIRECTORY_RULES: Sequence[DirectoryRule] = (
    DirectoryRule("cwd-flag", re.compile(r"(?:^|\s)(?:-C|--cwd)(?:=|\s+)(\S+)")),
    DirectoryRule("prefix-flag", re.compile(r"(?:^|\s)--prefix(?:=|\s+)(\S+)")),
    DirectoryRule(
        "node-modules-launcher",
        re.compile(r"(?:^|\s)(\S+?)/node_modules/\S*nux[ti]\S*\s+dev\b"),
    ),
    DirectoryRule("build-output", re.compile(r"(?:^|\s)(\S+?)/\.nuxt/")),
)

_REMOTE_ORIGIN_SECTION = re.compile(
    r'^\s*\[remote\s+"origin"\]\s*$(?P<body>.*?)(?=^\s*\[|\Z)',
    re.MULTILINE | re.DOTALL,
)
_URL_LINE = re.compile(r"^\s*url\s*=\s*(?P<url>.+?)\s*$", re.MULTILINE)
_SCP_STYLE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+\.[a-z]+):(?P<path>(?!//).+)$", re.IGNORECASE)
_SSH_URL = re.compile(r"^ssh://(?:[\w.-]+@)?(?P<host>[\w.-]+)(?::\d+)?/(?P<path>.+)$", re.IGNORECASE)
_NPM_SHORTHAND_HOSTS = {
    "github": "github.com",
    "gitlab": "gitlab.com",
    "bitbucket": "bitbucket.org",
}
_BARE_SHORTHAND = re.compile(r"^[\w.-]+/[\w.-]+$")


def _clean_path(raw: str) -> Optional[str]:
    candidate = raw.strip().strip("'\"")
    candidate = os.path.expanduser(candidate)
    if not candidate.startswith("/"):
        return None
    candidate = candidate.rstrip("/")
    return candidate or None


def infer_directory(
    command: str, rules: Sequence[DirectoryRule] = DIRECTORY_RULES
) -> Optional[str]:
    for rule in rules:
        directory = rule.match(command)
        if directory:
            logger.debug("directory rule %s matched %s", rule.name, directory)
            return directory
    return None


def lookup_process_cwd(
    pid: int,
    runner: CommandRunner = run_command,
    timeout: float = CWD_LOOKUP_TIMEOUT,
) -> Optional[str]:
    """Ask ``lsof`` for the working directory of ``pid``.

    Output uses the ``-F`` field format, where the ``n`` line carries the
    path. Timeouts and failures yield ``None``.
    """

    output = runner(["lsof", "-a", "-p", str(pid), "-d", "cwd", "-Fn"], timeout=timeout)
    if not output:
        return None
    for line in output.splitlines():
        if line.startswith("n") and len(line) > 1:
            return line[1:].rstrip("/") or "/"
    return None


def _string_field(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _repository_field(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return _string_field(value.get("url"))
    return _string_field(value)


def read_manifest(directory: PathLike) -> Optional[ProjectInfo]:
    path = Path(directory) / MANIFEST_FILENAME
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("could not read %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        return None
    return ProjectInfo(
        name=_string_field(data.get("name")),
        version=_string_field(data.get("version")),
        repository=_repository_field(data.get("repository")),
    )


def read_git_remote(directory: PathLike) -> Optional[str]:
    path = Path(directory) / GIT_CONFIG_PATH
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("could not read %s: %s", path, exc)
        return None
    section = _REMOTE_ORIGIN_SECTION.search(text)
    if not section:
        return None
    url = _URL_LINE.search(section.group("body"))
    if not url:
        return None
    return url.group("url")


def resolve_project(
    pid: int,
    command: str,
    runner: CommandRunner = run_command,
    timeout: float = CWD_LOOKUP_TIMEOUT,
) -> ResolvedProject:
    """Work out which checkout ``pid`` was started from and describe it.

    Every stage may come back empty; the result then simply carries fewer
    fields.
    """

    cwd = infer_directory(command)
    if cwd is None:
        cwd = lookup_process_cwd(pid, runner=runner, timeout=timeout)
    if cwd is None:
        return ResolvedProject()

    info = read_manifest(cwd)
    if info is not None and not info.repository:
        remote = read_git_remote(cwd)
        if remote:
            info = replace(info, repository=remote)
    return ResolvedProject(cwd=cwd, project_info=info)


def normalize_repository_url(raw: str) -> str:
    """Turn a manifest or git remote URL into something a browser can open."""

    url = raw.strip()
    if url.startswith("git+"):
        url = url[len("git+"):]

    shorthand, sep, rest = url.partition(":")
    if sep and shorthand in _NPM_SHORTHAND_HOSTS and not rest.startswith("//"):
        url = f"https://{_NPM_SHORTHAND_HOSTS[shorthand]}/{rest}"
    elif _BARE_SHORTHAND.match(url):
        url = f"https://github.com/{url}"
    else:
        ssh = _SSH_URL.match(url)
        scp = _SCP_STYLE.match(url) if ssh is None else None
        if ssh:
            url = f"https://{ssh.group('host')}/{ssh.group('path')}"
        elif scp:
            url = f"https://{scp.group('host')}/{scp.group('path')}"
        elif url.startswith("git://"):
            url = "https://" + url[len("git://"):]

    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url.rstrip("/")


__all__ = [
    "DIRECTORY_RULES",
    "DirectoryRule",
    "infer_directory",
    "lookup_process_cwd",
    "normalize_repository_url",
    "read_git_remote",
    "read_manifest",
    "resolve_project",
]
