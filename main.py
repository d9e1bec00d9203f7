"""
Crate Action Service - CLI Entrypoint
=====================================
Serves the crate purchase Solana Action over HTTP.

    python main.py serve
    python main.py serve --port 8080 --reload
"""

import argparse

from config.settings import Settings


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cratebuy",
        description="Buy a weighted token crate with one Solana Action"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the Action HTTP API")
    serve_parser.add_argument(
        "--host", type=str, default=Settings.API_HOST,
        help=f"Bind address (default: {Settings.API_HOST})"
    )
    serve_parser.add_argument(
        "--port", type=int, default=Settings.API_PORT,
        help=f"Bind port (default: {Settings.API_PORT})"
    )
    serve_parser.add_argument(
        "--reload", action="store_true",
        help="Auto-reload on code changes (development)"
    )

    return parser


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn
    from cratebuy.shared.system.logging import Logger

    Logger.section("Crate Action Service")
    uvicorn.run(
        "cratebuy.interface.api_service:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level="info",
        reload=args.reload,
    )


def main() -> None:
    parser = create_parser()
    args = parser.parse_args()

    if args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
