"""Entry point: python -m dodemansknop [--config PATH] [--host HOST] [--port PORT]."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from dodemansknop.bootstrap import run
from dodemansknop.config import ConfigError, load_settings

logger = logging.getLogger("dodemansknop")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="dodemansknop", description="Dead man's switch: alert when pings stop.")
    parser.add_argument("--config", default=None, help="JSON/YAML settings file (default: dodemansknop.json)")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s %(message)s")
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        logger.error("configuration error: %s", e)
        return 2
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info(
        "loaded settings: notifier=%s grace=%ss listen=%s:%s",
        settings.notifier_type,
        settings.grace_period_seconds,
        args.host if args.host is not None else settings.host,
        args.port if args.port is not None else settings.port,
    )

    try:
        run(settings, host=args.host, port=args.port)
    except ConfigError as e:
        logger.error("configuration error: %s", e)
        return 2
    except KeyboardInterrupt:
        logger.info("stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
