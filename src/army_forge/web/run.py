"""
Launch the Army Forge API:

    python -m army_forge.web.run

Picks a free port if the configured one is taken, sets up logging and starts
uvicorn.
"""
from __future__ import annotations

import argparse
import logging
import socket
import sys
from pathlib import Path

import uvicorn

from army_forge.config import ConfigError, load_config
from army_forge.web import session

logger = logging.getLogger(__name__)


def find_available_port(host: str, start_port: int, *, max_tries: int = 50) -> tuple[int, bool]:
    """Return the first bindable port from ``start_port`` upward and whether it differs from it."""
    if max_tries < 1:
        raise ValueError("max_tries must be >= 1")

    for port in range(start_port, start_port + max_tries):
        try:
            with socket.create_server((host, port), reuse_port=False):
                pass
        except OSError as exc:
            logger.debug("Port %d on %s unavailable: %s", port, host, exc)
            continue
        if port != start_port:
            logger.info("Configured port %d is busy; using %d", start_port, port)
        return port, port != start_port

    raise RuntimeError(f"No free port on {host} in {start_port}-{start_port + max_tries - 1}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m army_forge.web.run",
        description="Launch the Army Forge list builder API.",
    )
    parser.add_argument("--settings", type=Path, default=None, help="Settings JSON file (default: packaged settings).")
    parser.add_argument("--host", default=None, help="Host to listen on (default: from settings).")
    parser.add_argument("--port", type=int, default=None, help="Starting port (default: from settings).")
    parser.add_argument("--reload", action="store_true", help="Enable uvicorn --reload.")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.settings)
    except ConfigError as exc:
        print(f"[army-forge] {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    session.configure(config)

    host = args.host or config.host
    try:
        chosen_port, did_fallback = find_available_port(host, args.port or config.port, max_tries=50)
    except (RuntimeError, ValueError) as exc:
        print(f"[army-forge] Failed to select a free port: {exc}", file=sys.stderr)
        return 2

    if did_fallback:
        print(f"[army-forge] Serving on http://{host}:{chosen_port} (configured port was in use).")
    else:
        print(f"[army-forge] Serving on http://{host}:{chosen_port}.")

    try:
        uvicorn.run(
            "army_forge.web.main:app",
            host=host,
            port=chosen_port,
            reload=args.reload,
            log_level=config.log_level.lower(),
        )
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
