from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

MIN_PORT = 1024
MAX_PORT = 65535
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

DESCRIPTION = """\
Serve a small website from a JSON routing descriptor on a local port.

The descriptor is a JSON object mapping request paths (without the opening
slash, or "/" for the root) to [content-type, file-path] pairs. Relative
file paths are taken from the directory holding the descriptor. The
descriptor is re-read on every request, so edits take effect immediately.
"""


class ConfigError(ValueError):
    """Raised when the startup parameters cannot be used."""


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    descriptor_path: str
    log_level: str = "INFO"


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pathmap", description=DESCRIPTION)
    parser.add_argument("port", help=f"TCP port to listen on, in range [{MIN_PORT}, {MAX_PORT}].")
    parser.add_argument("descriptor", help="Path to the JSON routing descriptor.")
    parser.add_argument(
        "--host",
        default=environ.get("PATHMAP_HOST", "127.0.0.1"),
        help="Address to bind (default: %(default)s).",
    )
    parser.add_argument(
        "--log-level",
        default=environ.get("PATHMAP_LOG_LEVEL", "INFO").upper(),
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging verbosity (default: %(default)s).",
    )
    return parser


def load_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    environ = os.environ if environ is None else environ
    args = build_parser(environ).parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {args.log_level!r}")
    return ServerConfig(
        host=args.host,
        port=coerce_port(args.port),
        # relative to the working directory at startup
        descriptor_path=os.path.abspath(args.descriptor),
        log_level=args.log_level,
    )


def coerce_port(raw: str) -> int:
    if not raw.isascii() or not raw.isdigit():
        raise ConfigError(f"Invalid port argument: {raw!r}")
    value = int(raw)
    if value < MIN_PORT or value > MAX_PORT:
        raise ConfigError(f"Port number must be in range [{MIN_PORT}, {MAX_PORT}], got {value}")
    return value


__all__ = ["ConfigError", "ServerConfig", "build_parser", "coerce_port", "load_config"]
