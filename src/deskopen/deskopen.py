"""Open a file or URL in the user's preferred application.

deskopen follows the freedesktop application association model. The argument
is classified (a local file gets its MIME type sniffed, a URL gets the synthetic
type `x-scheme-handler/<scheme>`), the type is looked up in the layered
`mimeapps.list` / `defaults.list` / `mimeinfo.cache` files, and the chosen
`.desktop` file's Exec line is expanded and exec'd in place of this process.

Usage:
    deskopen { file | URL }
    deskopen { -h | --help }

Exit codes:
- 0: Success. The application replaced this process, or help was printed.
- 1: Error in command line syntax.
- 2: The file passed on the command line does not exist.
- 3: No MIME type, association or usable application could be found.
- 4: The chosen program could not be started.
- 5: The file exists but cannot be read.

Set XDG_UTILS_DEBUG_LEVEL=1 to see each step on stderr, or DESKOPEN_LOG to a
file path to get JSON lines for every decision.
"""

from __future__ import annotations

import os
import sys

import structlog

from deskopen.core.associations import resolve
from deskopen.core.command import build_command, launch
from deskopen.core.config import Config, configure_logging, load_config
from deskopen.core.desktop import iter_descriptor_paths, parse_descriptor
from deskopen.core.errors import (
    DeskopenError,
    NoHandlerFound,
    PermissionDenied,
    TargetMissing,
    UsageError,
)
from deskopen.core.mime import classify
from deskopen.core.target import Target, normalize

log = structlog.get_logger()

USAGE = """\
Usage: deskopen { file | URL }
       deskopen { -h | --help }

Opens a file or URL in the user's preferred application.
"""

HELP_FLAGS = {"-h", "--help"}


def parse_args(argv: list[str]) -> str | None:
    """Return the single positional argument, or None when help was asked for."""
    positional: list[str] = []
    options_done = False
    for arg in argv:
        if not options_done and arg == "--":
            options_done = True
        elif not options_done and arg in HELP_FLAGS:
            return None
        elif not options_done and arg.startswith("-") and arg != "-":
            raise UsageError(f"unexpected option '{arg}'")
        else:
            positional.append(arg)

    if not positional:
        raise UsageError("file or URL argument missing")
    if len(positional) > 1:
        raise UsageError(f"unexpected argument '{positional[1]}'")
    return positional[0]


def check_target(target: Target) -> None:
    """Local files must exist and be readable before they are classified."""
    if target.path is None:
        return
    if not os.path.exists(target.path):
        raise TargetMissing(f"file '{target.path}' does not exist")
    if not os.access(target.path, os.R_OK):
        raise PermissionDenied(f"no permission to read file '{target.path}'")


def open_target(raw: str, config: Config) -> None:
    """Resolve `raw` and exec its default application.

    Only returns if the exec primitive returns, which it does not outside tests.
    Raises a DeskopenError subclass for every failure outcome.
    """
    target = normalize(raw)
    log.debug("normalized", raw=raw, path=target.path, uri=target.uri)
    check_target(target)

    mime = classify(target, config)
    if not mime:
        raise NoHandlerFound(f"no method available for opening '{raw}'")

    ref = resolve(mime, config)
    if ref is None:
        raise NoHandlerFound(f"no application associated with {mime}")
    log.debug("resolved", mime=mime, ref=ref)

    for path in iter_descriptor_paths(ref, config.data_search):
        descriptor = parse_descriptor(path)
        if descriptor is None:
            continue
        executable = descriptor.executable()
        if executable is None:
            log.debug("candidate_skipped", path=str(path), reason="not_resolvable")
            continue
        command = build_command(descriptor, target, executable)
        if command is None:
            log.debug("candidate_skipped", path=str(path), reason="cannot_handle_target")
            continue
        launch(command)
        return

    raise NoHandlerFound(f"no usable application for {mime} ({ref})")


def run(argv: list[str], config: Config) -> int:
    """Run one invocation and return its exit code."""
    try:
        raw = parse_args(argv)
        if raw is None:
            sys.stdout.write(USAGE)
            return 0
        open_target(raw, config)
    except UsageError as e:
        sys.stderr.write(f"deskopen: {e.message}\n{USAGE}")
        return e.exit_code
    except DeskopenError as e:
        log.debug("failed", error=type(e).__name__, exit_code=e.exit_code)
        sys.stderr.write(f"deskopen: {e.message}\n")
        return e.exit_code
    return 0


# === Entry point ===


def main() -> None:
    config = load_config()
    configure_logging(config)
    sys.exit(run(sys.argv[1:], config))


if __name__ == "__main__":
    main()
