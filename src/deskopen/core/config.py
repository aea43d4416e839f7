"""deskopen configuration: XDG base directories and logging."""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import structlog

ENV_CONFIG_HOME = "XDG_CONFIG_HOME"
ENV_CONFIG_DIRS = "XDG_CONFIG_DIRS"
ENV_DATA_HOME = "XDG_DATA_HOME"
ENV_DATA_DIRS = "XDG_DATA_DIRS"
ENV_CURRENT_DESKTOP = "XDG_CURRENT_DESKTOP"
ENV_DEBUG_LEVEL = "XDG_UTILS_DEBUG_LEVEL"
ENV_LOG = "DESKOPEN_LOG"
ENV_MIME_COMMAND = "DESKOPEN_MIME_COMMAND"

DEFAULT_CONFIG_DIRS = "/etc/xdg"
DEFAULT_DATA_DIRS = "/usr/local/share:/usr/share"

# file(1) prints "type/subtype; charset=..." with --mime
DEFAULT_MIME_COMMAND = ("file", "--brief", "--dereference", "--mime")


@dataclass(frozen=True)
class Config:
    """Directories and settings resolved once from the environment at startup."""

    config_home: Path
    data_home: Path
    config_dirs: tuple[Path, ...] = (Path("/etc/xdg"),)
    data_dirs: tuple[Path, ...] = (Path("/usr/local/share"), Path("/usr/share"))

    desktops: tuple[str, ...] = ()
    """Lowercased XDG_CURRENT_DESKTOP entries, most preferred first."""

    mime_command: tuple[str, ...] = DEFAULT_MIME_COMMAND
    debug_level: int = 0
    log: Path | None = None  # None = no JSON log file

    @property
    def config_search(self) -> tuple[Path, ...]:
        """User then system config directories (the mimeapps.list tier)."""
        return (self.config_home, *self.config_dirs)

    @property
    def data_search(self) -> tuple[Path, ...]:
        """User then system data directories (applications/ lives under these)."""
        return (self.data_home, *self.data_dirs)


# === Config Loading ===


def _get(environ: dict[str, str], name: str, default: str) -> str:
    """Environment lookup where an empty value counts as unset."""
    value = environ.get(name, "")
    return value if value else default


def _split_dirs(value: str) -> tuple[Path, ...]:
    """Split a colon list, dropping empty and relative entries."""
    return tuple(Path(p) for p in value.split(":") if p and os.path.isabs(p))


def _parse_debug_level(value: str) -> int:
    try:
        return max(int(value), 0)
    except ValueError:
        return 0


def load_config(environ: dict[str, str] | None = None, home: Path | None = None) -> Config:
    """Build the Config from environment variables, applying XDG defaults."""
    if environ is None:
        environ = dict(os.environ)
    if home is None:
        home = Path.home()

    config_home = Path(_get(environ, ENV_CONFIG_HOME, str(home / ".config")))
    data_home = Path(_get(environ, ENV_DATA_HOME, str(home / ".local" / "share")))

    desktops = tuple(
        d.lower() for d in environ.get(ENV_CURRENT_DESKTOP, "").split(":") if d
    )

    mime_command = tuple(environ.get(ENV_MIME_COMMAND, "").split()) or DEFAULT_MIME_COMMAND

    log_path = environ.get(ENV_LOG)

    return Config(
        config_home=config_home,
        data_home=data_home,
        config_dirs=_split_dirs(_get(environ, ENV_CONFIG_DIRS, DEFAULT_CONFIG_DIRS)),
        data_dirs=_split_dirs(_get(environ, ENV_DATA_DIRS, DEFAULT_DATA_DIRS)),
        desktops=desktops,
        mime_command=mime_command,
        debug_level=_parse_debug_level(environ.get(ENV_DEBUG_LEVEL, "")),
        log=Path(log_path).expanduser() if log_path else None,
    )


# === Logging ===


def configure_logging(config: Config) -> None:
    """Configure structlog based on config settings. Call once at startup.

    A log file gets JSON lines for every event. Without one, debug output goes
    to stderr when XDG_UTILS_DEBUG_LEVEL is set, otherwise only warnings do.
    """
    if config.log is not None:
        try:
            config.log.parent.mkdir(parents=True, exist_ok=True)
            stream = open(config.log, "a")
        except OSError as e:
            print(f"deskopen: cannot open log {config.log}: {e}", file=sys.stderr)
        else:
            structlog.configure(
                processors=[
                    structlog.processors.TimeStamper(fmt="iso", key="ts"),
                    structlog.processors.add_log_level,
                    structlog.processors.JSONRenderer(),
                ],
                wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
                logger_factory=structlog.PrintLoggerFactory(file=stream),
                cache_logger_on_first_use=False,
            )
            return

    level = logging.DEBUG if config.debug_level > 0 else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
