from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from .adapters.json_descriptor import JsonDescriptorSource
from .app.handlers import build_handler
from .app.server import run_server
from .config import ConfigError, load_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("pathmap")


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = load_config(argv)
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    source = JsonDescriptorSource(config.descriptor_path)
    handler = build_handler(source)
    logger.info("serving routes from %s", source.path)
    run_server(handler, config.port, host=config.host)


def run() -> None:  # pragma: no cover - cli entry point
    try:
        main()
    except ConfigError as exc:
        print(f"[pathmap] {exc}", file=sys.stderr)
        sys.exit(1)
    except OSError as exc:
        print(f"[pathmap] fatal error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover - cli entry point
    run()
