"""Run one of the services under uvicorn: ``python -m seal_bridge {bridge,proxy}``."""
from __future__ import annotations

import argparse

import uvicorn
from dotenv import load_dotenv

APPS = {
    "bridge": "seal_bridge.main:bridge_app",
    "proxy": "seal_bridge.main:proxy_app",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seal-bridge", description=__doc__)
    parser.add_argument("service", choices=sorted(APPS), help="which service to run")
    parser.add_argument("--host", default=None, help="bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="listen port (default: PORT or 3000)")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # Variables already set by the process manager win over .env.
    load_dotenv(override=False)

    from seal_bridge.config import get_settings

    settings = get_settings()
    uvicorn.run(
        APPS[args.service],
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
