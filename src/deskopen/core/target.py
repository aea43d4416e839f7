"""
Classification of the command-line argument as a local file or a URI.

Anything without a scheme, and any `file://` URI, becomes a canonical local
path. Other URIs are kept verbatim.
"""

from __future__ import annotations

import os
import re
import socket
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

FILE_URI_PREFIX = "file://"

# ASCII only: str.isalpha() would accept any Unicode letter
SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


@dataclass(frozen=True)
class Target:
    """What is being opened: a canonical local path, a URI, or both."""

    path: str | None = None
    uri: str | None = None

    def __post_init__(self):
        if self.path is None and self.uri is None:
            raise ValueError("Target needs a path or a URI")

    @property
    def scheme(self) -> str | None:
        """Scheme of the URI, e.g. 'https'."""
        if self.uri is None:
            return None
        m = SCHEME_RE.match(self.uri)
        return m.group(1) if m else None

    @property
    def default_argument(self) -> str:
        """Argument appended when an Exec line has no field codes."""
        return self.path if self.path is not None else self.uri


def get_scheme(raw: str) -> str | None:
    """Return the scheme of `raw`, or None if it has none."""
    m = SCHEME_RE.match(raw)
    return m.group(1) if m else None


def _local_hostnames() -> list[str]:
    try:
        return [socket.gethostname()]
    except OSError:
        return []


def file_uri_to_path(uri: str) -> str:
    """Convert a file:// URI to a (not yet canonical) path.

    The authority is dropped when it is `localhost` or this host's name. The
    fragment and query are cut before %XX decoding, so an encoded `%23` stays a
    literal `#` in the file name.
    """
    rest = uri
    for authority in ["localhost", *_local_hostnames()]:
        prefix = FILE_URI_PREFIX + authority
        if authority and rest.startswith(prefix + "/"):
            rest = rest[len(prefix) :]
            break
    else:
        rest = rest[len(FILE_URI_PREFIX) :]

    rest = rest.split("#", 1)[0]
    rest = rest.split("?", 1)[0]
    return os.fsdecode(unquote_to_bytes(rest))


def canonicalize(path: str) -> str:
    """Resolve symlinks and fold `.`/`..`. Relative paths use the cwd."""
    if path.startswith("-"):
        path = "./" + path
    return os.path.realpath(path)


def normalize(raw: str) -> Target:
    """Turn the raw argument into a Target."""
    if raw.startswith(FILE_URI_PREFIX):
        return Target(path=canonicalize(file_uri_to_path(raw)))
    if get_scheme(raw) is None:
        return Target(path=canonicalize(raw))
    return Target(uri=raw)
