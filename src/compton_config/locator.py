"""Find the configuration file to read."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, TextIO

from .errors import UnreadableConfigError
from .logging import TRACE, get_logger

CONFIG_SUFFIXES = ("compton.conf", "compton/compton.conf")
LEGACY_CONFIG_FILENAME = ".compton.conf"

logger = get_logger("compton.config.locator")


@dataclass
class LocatedConfig:
    """An opened configuration file and the path it was opened from.

    Use it as a context manager so the stream is closed on every exit path.
    """

    path: str
    stream: TextIO

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> "LocatedConfig":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def config_search_dirs(env: Optional[Mapping[str, str]] = None) -> List[Path]:
    """Return the XDG configuration directories, most important first."""

    env = os.environ if env is None else env
    dirs: List[Path] = []
    config_home = env.get("XDG_CONFIG_HOME")
    if config_home:
        dirs.append(Path(config_home))
    else:
        home = env.get("HOME")
        if home:
            dirs.append(Path(home) / ".config")
    config_dirs = env.get("XDG_CONFIG_DIRS") or "/etc/xdg"
    dirs.extend(Path(entry) for entry in config_dirs.split(":") if entry)
    return dirs


def _try_open(path: str) -> Optional[TextIO]:
    try:
        return open(path, "r", encoding="utf-8")
    except OSError as exc:
        logger.log(TRACE, "Skipping config candidate", extra={"path": path, "reason": str(exc)})
        return None


def locate(
    explicit_path: Optional[str] = None, *, env: Optional[Mapping[str, str]] = None
) -> Optional[LocatedConfig]:
    """Open the configuration file.

    An explicit path must be readable; failing to open it raises
    :class:`UnreadableConfigError`. Without one, the XDG directories are
    searched for each known file name in turn, then ``~/.compton.conf``.
    Returns ``None`` when nothing is found.
    """

    if explicit_path is not None:
        path = os.fspath(explicit_path)
        try:
            stream = open(path, "r", encoding="utf-8")
        except OSError as exc:
            raise UnreadableConfigError(
                f'Failed to read configuration file "{path}": {exc.strerror or exc}'
            ) from exc
        return LocatedConfig(path, stream)

    env = os.environ if env is None else env
    search_dirs = config_search_dirs(env)
    for suffix in CONFIG_SUFFIXES:
        for directory in search_dirs:
            candidate = str(directory / suffix)
            stream = _try_open(candidate)
            if stream is not None:
                return LocatedConfig(candidate, stream)

    home = env.get("HOME")
    if home:
        candidate = str(Path(home) / LEGACY_CONFIG_FILENAME)
        stream = _try_open(candidate)
        if stream is not None:
            return LocatedConfig(candidate, stream)
    return None
