"""
Locating and reading application descriptors (.desktop files).

Descriptors live under `<data dir>/applications/`, possibly in vendor
subdirectories. Candidates are produced lazily so the launcher can skip one
that does not qualify and carry on from the same point.
"""

from __future__ import annotations

import itertools
import os
import re
import shutil
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

import structlog

from deskopen.core.command import split_exec
from deskopen.core.config import Config
from deskopen.core.entry import DESKTOP_ENTRY_GROUP, lookup

log = structlog.get_logger()

APPLICATIONS_DIR = "applications"

FIELD_CODE_RE = re.compile(r"%.")


@dataclass(frozen=True)
class ApplicationDescriptor:
    """The [Desktop Entry] fields deskopen needs."""

    path: Path
    exec: str
    icon: str | None = None
    name: str | None = None

    @property
    def program(self) -> str:
        """First Exec word with field codes removed."""
        words = split_exec(self.exec)
        if not words:
            return ""
        return FIELD_CODE_RE.sub("", words[0])

    @property
    def arguments(self) -> list[str]:
        """Exec words after the program, field codes intact."""
        return split_exec(self.exec)[1:]

    def executable(self) -> str | None:
        """PATH lookup of the program. None if it does not resolve."""
        program = self.program
        if not program:
            return None
        return shutil.which(program)


def parse_descriptor(path: Path) -> ApplicationDescriptor | None:
    """Read a descriptor file. None if it is unreadable or has no Exec."""
    exec_value = lookup(path, "Exec", DESKTOP_ENTRY_GROUP)
    if not exec_value:
        log.debug("descriptor_without_exec", path=str(path))
        return None
    return ApplicationDescriptor(
        path=path,
        exec=exec_value,
        icon=lookup(path, "Icon", DESKTOP_ENTRY_GROUP),
        name=lookup(path, "Name", DESKTOP_ENTRY_GROUP),
    )


def _is_readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def _vendor_candidates(ref: str, app_dir: Path) -> list[Path]:
    """`vendor/app` then the flat `vendor-app`, split on the last dash."""
    if "-" not in ref:
        return []
    vendor, app = ref.rsplit("-", 1)
    return [app_dir / vendor / app, app_dir / f"{vendor}-{app}"]


def _walk(ref: str, directory: Path, visited: set[str] | None = None) -> Iterator[Path]:
    """Depth-first: `directory/ref`, then each subdirectory in name order."""
    if visited is None:
        visited = set()
    # symlinked directory loops
    real = os.path.realpath(directory)
    if real in visited:
        return
    visited.add(real)
    candidate = directory / ref
    if _is_readable_file(candidate):
        yield candidate
    try:
        subdirs = sorted(p for p in directory.iterdir() if p.is_dir())
    except OSError:
        return
    for sub in subdirs:
        yield from _walk(ref, sub, visited)


def iter_descriptor_paths(ref: str, data_dirs: Iterable[Path]) -> Iterator[Path]:
    """Yield readable descriptor files named by `ref`, in search order.

    For each data dir: the vendor split candidates first, then the recursive
    search of its applications/ directory. A path is yielded at most once.
    """
    seen: set[Path] = set()
    for data_dir in data_dirs:
        app_dir = data_dir / APPLICATIONS_DIR
        if not app_dir.is_dir():
            continue
        vendored = (p for p in _vendor_candidates(ref, app_dir) if _is_readable_file(p))
        for path in itertools.chain(vendored, _walk(ref, app_dir)):
            if path in seen:
                continue
            seen.add(path)
            log.debug("descriptor_candidate", ref=ref, path=str(path))
            yield path


# === Locator ===


def resolves_to_executable(ref: str, config: Config) -> bool:
    """Whether the first descriptor found for `ref` names a program on PATH.

    Only the first candidate counts: a shadowed copy further down the search
    path is not consulted.
    """
    for path in iter_descriptor_paths(ref, config.data_search):
        descriptor = parse_descriptor(path)
        ok = descriptor is not None and descriptor.executable() is not None
        log.debug("executable_check", ref=ref, path=str(path), resolves=ok)
        return ok
    log.debug("descriptor_not_found", ref=ref)
    return False


def locate(ref: str, config: Config) -> ApplicationDescriptor | None:
    """First descriptor for `ref` whose program resolves on PATH."""
    for path in iter_descriptor_paths(ref, config.data_search):
        descriptor = parse_descriptor(path)
        if descriptor is not None and descriptor.executable() is not None:
            return descriptor
    return None
