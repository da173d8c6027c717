"""Run the live track map web service.

Usage:
    uv run python scripts/serve.py
    uv run python scripts/serve.py --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import argparse

import uvicorn

from racing_map.config import MappingConfig, configure_logging


def main() -> None:
    ap = argparse.ArgumentParser(description="Serve the live track map API")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    args = ap.parse_args()

    config = MappingConfig.from_env()
    configure_logging(config.log_level)

    uvicorn.run(
        "racing_map.web.app:app",
        host=args.host,
        port=args.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
