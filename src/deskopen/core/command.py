"""
Exec line handling: word splitting, field-code substitution and launch.

Word splitting mirrors what a plain `read` in a POSIX shell does to an Exec
value: words break on unescaped whitespace and a backslash makes the next
character literal. Quote characters are ordinary characters, so
`Exec=foo "a b"` gives the words `foo`, `"a`, `b"`. That is a known
limitation and changing it changes which descriptors launch identically.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from deskopen.core.errors import ActionFailed

if TYPE_CHECKING:
    from deskopen.core.desktop import ApplicationDescriptor
    from deskopen.core.target import Target

log = structlog.get_logger()

WHITESPACE = " \t\n"

NAME_CODES = frozenset({"%c"})
FILE_CODES = frozenset({"%f", "%F"})
URL_CODES = frozenset({"%u", "%U"})
ICON_CODES = frozenset({"%i"})


def split_exec(value: str) -> list[str]:
    """Split an Exec value into words. Only backslash escaping is understood."""
    words: list[str] = []
    current: list[str] = []
    in_word = False
    escaped = False
    for c in value:
        if escaped:
            current.append(c)
            in_word = True
            escaped = False
        elif c == "\\":
            escaped = True
            in_word = True
        elif c in WHITESPACE:
            if in_word:
                words.append("".join(current))
                current = []
                in_word = False
        else:
            current.append(c)
            in_word = True
    # A trailing lone backslash is a line continuation and is dropped
    if in_word and current:
        words.append("".join(current))
    return words


def expand_field_codes(
    tokens: list[str], target: Target, name: str | None = None, icon: str | None = None
) -> list[str] | None:
    """Substitute field codes in Exec arguments.

    Returns the new argument list, or None when the command needs a local file
    (`%f`/`%F`) and the target is URI-only. If no field code was present, the
    target is appended as one extra argument.
    """
    out: list[str] = []
    replaced = False
    for token in tokens:
        if token in NAME_CODES:
            out.append(name or "")
        elif token in FILE_CODES:
            if target.path is None:
                return None
            out.append(target.path)
        elif token in URL_CODES:
            out.append(target.uri if target.uri is not None else target.path)
        elif token in ICON_CODES:
            out.extend(["--icon", icon or ""])
        else:
            out.append(token)
            continue
        replaced = True
    if not replaced:
        out.append(target.default_argument)
    return out


@dataclass(frozen=True)
class CommandLine:
    """A fully substituted command ready for exec."""

    executable: str
    """Resolved path of the program."""

    program: str
    """Program name as written in the Exec line, used as argv[0]."""

    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


def build_command(
    descriptor: ApplicationDescriptor, target: Target, executable: str
) -> CommandLine | None:
    """Build the command for `descriptor`, or None if it cannot take `target`."""
    args = expand_field_codes(descriptor.arguments, target, descriptor.name, descriptor.icon)
    if args is None:
        log.debug("build_aborted", descriptor=str(descriptor.path), reason="needs_local_file")
        return None
    return CommandLine(executable=executable, program=descriptor.program, args=tuple(args))


def launch(command: CommandLine) -> None:
    """Replace the current process with `command`. Does not return on success."""
    log.info("launching", executable=command.executable, argv=command.argv)
    try:
        os.execv(command.executable, command.argv)
    except OSError as e:
        raise ActionFailed(f"cannot execute {command.executable}: {e.strerror or e}") from e
