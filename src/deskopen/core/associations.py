"""
MIME type to application descriptor id resolution.

Tiers, in order, first hit wins:

1. `mimeapps.list` in the config directories (user, then system).
2. `mimeapps.list` under `applications/` in the data directories (legacy).
3. `defaults.list` and `mimeinfo.cache` under `applications/` in the data
   directories, read as flat `mime=id;id;` lines.

Tiers 1 and 2 walk the `;` list and take the first id whose program resolves;
an installed-but-broken app does not hide the next one. Tier 3 takes the first
id as is.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import structlog

from deskopen.core.config import Config
from deskopen.core.desktop import APPLICATIONS_DIR, resolves_to_executable
from deskopen.core.entry import DEFAULT_APPLICATIONS_GROUP, lookup
from deskopen.core.mime import is_valid_mime

log = structlog.get_logger()

MIMEAPPS_LIST = "mimeapps.list"
TRADER_FILES = ("defaults.list", "mimeinfo.cache")


def mimeapps_filenames(desktops: tuple[str, ...]) -> list[str]:
    """Desktop-specific lists first, e.g. ['gnome-mimeapps.list', 'mimeapps.list']."""
    return [f"{d}-{MIMEAPPS_LIST}" for d in desktops] + [MIMEAPPS_LIST]


def split_ids(value: str) -> list[str]:
    """'a.desktop;b.desktop;' -> ['a.desktop', 'b.desktop']."""
    return [v for v in value.split(";") if v]


def _mimeapps_paths(dirs: tuple[Path, ...], config: Config) -> Iterator[Path]:
    names = mimeapps_filenames(config.desktops)
    for d in dirs:
        for name in names:
            yield d / name


def _first_resolvable(mime: str, paths: Iterator[Path], config: Config) -> str | None:
    for path in paths:
        value = lookup(path, mime, DEFAULT_APPLICATIONS_GROUP, first_only=True)
        if not value:
            continue
        log.debug("mimeapps_match", path=str(path), mime=mime, value=value)
        for ref in split_ids(value):
            if resolves_to_executable(ref, config):
                return ref
            log.debug("candidate_skipped", ref=ref, reason="not_resolvable")
    return None


def _from_trader_files(mime: str, config: Config) -> str | None:
    for data_dir in config.data_search:
        for name in TRADER_FILES:
            path = data_dir / APPLICATIONS_DIR / name
            value = lookup(path, mime, None, first_only=True)
            ids = split_ids(value) if value else []
            if ids:
                log.debug("trader_match", path=str(path), mime=mime, ref=ids[0])
                return ids[0]
    return None


def resolve(mime: str, config: Config) -> str | None:
    """Return the descriptor id associated with `mime`, or None."""
    if not is_valid_mime(mime):
        log.debug("invalid_mime", mime=mime)
        return None

    ref = _first_resolvable(mime, _mimeapps_paths(config.config_search, config), config)
    if ref is not None:
        return ref

    data_app_dirs = tuple(d / APPLICATIONS_DIR for d in config.data_search)
    ref = _first_resolvable(mime, _mimeapps_paths(data_app_dirs, config), config)
    if ref is not None:
        return ref

    return _from_trader_files(mime, config)
