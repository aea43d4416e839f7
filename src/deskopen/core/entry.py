"""
Restricted INI reader for mimeapps.list, .desktop and trader files.

Only `key=value` splitting on the first `=` is understood. There is no
unescaping, no quoting, no locale suffix handling and no whitespace trimming
around keys: `Exec=foo` matches key `Exec`, `Exec = foo` does not.
"""

from __future__ import annotations

from pathlib import Path

import structlog

log = structlog.get_logger()

DESKTOP_ENTRY_GROUP = "Desktop Entry"
DEFAULT_APPLICATIONS_GROUP = "Default Applications"


def lookup(
    path: Path | str, key: str, group: str | None, first_only: bool = False
) -> str | None:
    """Return the value of `key` inside `[group]`, or None.

    A line exactly equal to `[group]` enters the group; any other line starting
    with `[` leaves it. With `group=None` every line is in scope, which is how
    flat trader files (defaults.list, mimeinfo.cache) are read.

    `first_only` stops at the first non-empty value. Otherwise the last
    assignment wins. Missing or unreadable files give None.
    """
    header = f"[{group}]" if group is not None else None
    prefix = f"{key}="
    in_group = group is None
    value: str | None = None

    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for raw_line in f:
                line = raw_line.rstrip("\r\n")
                if header is not None and line.startswith("["):
                    in_group = line == header
                    continue
                if not in_group or not line.startswith(prefix):
                    continue
                value = line[len(prefix) :]
                if first_only and value:
                    break
    except OSError as e:
        log.debug("entry_unreadable", path=str(path), error=str(e))
        return None

    return value
