"""Launch the product service under uvicorn."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from product_service.config import get_settings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the product service.")
    parser.add_argument("--host", default=None, help="Bind address (overrides APP_HOST).")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (overrides APP_PORT).",
    )
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        default=None,
        help="Log level for service and uvicorn output (overrides LOG_LEVEL).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()

    host = args.host or settings.app_host
    port = args.port or settings.app_port
    log_level = (args.log_level or settings.log_level).lower()
    root_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=root_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(root_level)

    uvicorn.run(
        "product_service.app:create_app",
        factory=True,
        host=host,
        port=port,
        log_level=log_level,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
