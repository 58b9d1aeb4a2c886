# scripts/smoke.py
"""
Smoke Test Script against a live Flecto manager.

Usage
-----
1. Build one snapshot and print it:
    $ python scripts/smoke.py

2. Also resolve a request:
    $ python scripts/smoke.py --host example.com --path /old

Configuration comes from `FLECTO_*` environment variables or a `.env` file.
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")
else:
    print("⚠️  Warning: No .env file found! Using process environment only.")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

from flecto_agent.core.errors import FlectoError  # noqa: E402
from flecto_agent.core.settings import load_settings  # noqa: E402
from flecto_agent.sync.client import FlectoClient  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="flecto-agent smoke test")
    parser.add_argument("--host", default="localhost", help="Request host to resolve")
    parser.add_argument("--path", default=None, help="Request path to resolve")
    args = parser.parse_args()

    settings = load_settings()
    print(f"Manager project: {settings.url_api_project()}")

    client = FlectoClient.from_settings(settings)
    try:
        client.initialize()
    except FlectoError as exc:
        print(f"❌ Initialization failed: {exc}")
        traceback.print_exc()
        return 1

    snapshot = client.current_snapshot
    print(
        f"✅ Version {snapshot.version}: "
        f"{snapshot.redirect_count} redirects, {snapshot.page_count} pages"
    )

    if args.path:
        redirect, target = client.match_redirect(args.host, args.path)
        page = client.match_page(args.host, args.path)
        print(f"   redirect: {redirect!r} -> {target!r}")
        print(f"   page:     {page!r}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
