"""MIME type of a Target: sniffed for local files, synthesized for URIs."""

from __future__ import annotations

import subprocess

import structlog

from deskopen.core.config import Config
from deskopen.core.target import Target

log = structlog.get_logger()

SCHEME_HANDLER_FMT = "x-scheme-handler/{}"


def is_valid_mime(mime: str | None) -> bool:
    """True for `type/subtype` with exactly one slash and both parts non-empty."""
    if not mime:
        return False
    parts = mime.split("/")
    return len(parts) == 2 and all(parts)


def strip_parameters(output: str) -> str:
    """'text/plain; charset=utf-8' -> 'text/plain'."""
    return output.split(";", 1)[0].strip()


def sniff(path: str, config: Config) -> str | None:
    """Run the external sniffer on `path`. None if it is missing or fails."""
    cmd = [*config.mime_command, path]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        log.warning("sniffer_unavailable", command=cmd[0], error=str(e))
        return None
    if result.returncode != 0:
        log.debug("sniffer_failed", command=cmd, returncode=result.returncode)
        return None
    mime = strip_parameters(result.stdout)
    return mime or None


def classify(target: Target, config: Config) -> str | None:
    """Return the MIME type used for association lookup.

    The caller has already checked that a local path exists and is readable.
    """
    if target.path is not None:
        mime = sniff(target.path, config)
    else:
        mime = SCHEME_HANDLER_FMT.format(target.scheme)
    log.debug("classified", target=target.path or target.uri, mime=mime)
    return mime
