#!/usr/bin/env python3
"""
Clocks authentication gateway.

Email/password and Google sign-in delegated to Firebase Authentication, with the
user id kept in an HttpOnly session cookie. Also serves the prebuilt client bundle.
"""

import argparse
import json
import logging
import sys

from dotenv import find_dotenv, load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
)


def main():
    """CLI entry point."""
    # `.env` must be loaded before anything reads the environment.
    load_dotenv(find_dotenv(".env", usecwd=True))

    parser = argparse.ArgumentParser(
        description="Authentication gateway for the Clocks web app",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the HTTP server on the configured port (CLOCKS_API_PORT)
  python main.py --serve

  # Override the bind address
  python main.py --serve --host 127.0.0.1 --port 9000

  # Show the effective (non-secret) configuration
  python main.py --print-config
        """,
    )
    parser.add_argument("--serve", action="store_true", help="Run the HTTP server")
    parser.add_argument("--host", default="0.0.0.0", help="Server bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Server listen port (default: CLOCKS_API_PORT or 8080)")
    parser.add_argument(
        "--print-config", action="store_true", help="Print the effective configuration as JSON (secrets omitted)"
    )

    args = parser.parse_args()

    if args.print_config:
        from gateway.auth.config import load_gateway_config, public_config_summary

        print(json.dumps(public_config_summary(load_gateway_config()), indent=2, sort_keys=False))
        return

    if args.serve:
        from gateway.api.server import run

        run(host=args.host, port=args.port)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
