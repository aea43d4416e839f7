#!/usr/bin/env python3
"""
Debug helper for inspecting how deskopen reads a desktop entry.

Usage:
    python bin/desktop-entry-dump.py firefox.desktop
    python bin/desktop-entry-dump.py /usr/share/applications/firefox.desktop

An id is searched for the way deskopen searches for it; a path is read
directly. Prints the fields, the Exec words and the resolved executable.
"""

import sys
from pathlib import Path

try:
    from deskopen.core.command import split_exec
    from deskopen.core.config import load_config
    from deskopen.core.desktop import iter_descriptor_paths, parse_descriptor
except ImportError:
    print("Error: deskopen not installed. Run: pip install -e .")
    sys.exit(1)


def dump_descriptor(path):
    """Print the parsed view of one descriptor file."""
    print(f"file: {path}")
    descriptor = parse_descriptor(path)
    if descriptor is None:
        print("  (no Exec key in [Desktop Entry])")
        return

    print(f"  Exec: {descriptor.exec!r}")
    print(f"  Icon: {descriptor.icon!r}")
    print(f"  Name: {descriptor.name!r}")
    print("  words:")
    for word in split_exec(descriptor.exec):
        print(f"    {word!r}")
    print(f"  program: {descriptor.program!r}")
    print(f"  executable: {descriptor.executable()!r}")


def main():
    if len(sys.argv) < 2:
        print("Usage: desktop-entry-dump.py <desktop id | path>")
        print("Example: desktop-entry-dump.py org.gnome.Nautilus.desktop")
        sys.exit(1)

    arg = sys.argv[1]
    if "/" in arg:
        paths = [Path(arg)]
    else:
        config = load_config()
        paths = list(iter_descriptor_paths(arg, config.data_search))

    if not paths:
        print(f"No desktop entry found for {arg!r}")
        sys.exit(1)

    for path in paths:
        dump_descriptor(path)
        print()


if __name__ == "__main__":
    main()
