#!/usr/bin/env python
"""Run the Virtual Advisor API server.

Usage:
    python scripts/run_server.py [--mode dev|prod] [--host HOST] [--port PORT]

Examples:
    python scripts/run_server.py                    # Development mode (default)
    python scripts/run_server.py --mode prod        # Production mode
    python scripts/run_server.py --templates-only   # Never call an LLM backend
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from advisor.utils.config import init_config  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the Virtual Advisor server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_server.py --host 127.0.0.1   # Localhost only
    python scripts/run_server.py --port 8080        # Custom port
    python scripts/run_server.py --mode prod --workers 8
        """,
    )
    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode: dev (with reload) or prod (with workers)",
    )
    parser.add_argument("--host", type=str, default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Number of worker processes (prod mode only, default: 4)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (default: info for dev, warning for prod)",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file")
    parser.add_argument(
        "--templates-only",
        action="store_true",
        help="Disable LLM answers; every agent replies from its templates",
    )
    return parser


def print_banner(title: str, rows: dict[str, object]) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Virtual Advisor - {title}")
    print(f"{'=' * 60}")
    for key, value in rows.items():
        print(f"  {key + ':':<11}{value}")
    print(f"{'=' * 60}\n")


def main() -> None:
    """Run the server with the specified configuration."""
    args = build_parser().parse_args()

    config_path = args.config
    if config_path is None:
        default_config = project_root / "configs" / "app.yaml"
        if default_config.exists():
            config_path = str(default_config)

    # The app process re-reads its configuration; pass overrides via env
    if args.host:
        os.environ["APP_HOST"] = args.host
    if args.port:
        os.environ["APP_PORT"] = str(args.port)
    if args.templates_only:
        os.environ["LLM_ENABLED"] = "false"

    config = init_config(yaml_path=config_path, env_file=args.env_file)
    host = config.app.host
    port = config.app.port

    if args.mode == "dev":
        log_level = args.log_level or "info"
        print_banner(
            "Development Server",
            {
                "Host": host,
                "Port": port,
                "LLM": "enabled" if config.llm.enabled else "templates only",
                "Log Level": log_level,
                "Docs": f"http://{host}:{port}/docs",
            },
        )
        uvicorn.run(
            "advisor.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=[str(project_root / "advisor")],
            log_level=log_level,
        )
    else:
        log_level = args.log_level or "warning"
        print_banner(
            "Production Server",
            {
                "Host": host,
                "Port": port,
                "Workers": args.workers,
                "LLM": "enabled" if config.llm.enabled else "templates only",
                "Log Level": log_level,
            },
        )
        uvicorn.run(
            "advisor.main:app",
            host=host,
            port=port,
            reload=False,
            workers=args.workers,
            log_level=log_level,
            access_log=False,
        )


if __name__ == "__main__":
    main()
