"""
Spotify activity snapshot.

Fetches the owner's listening activity once, using the same aggregator as
the deployed proxy, and prints it either as tables or as the raw JSON
payload the front-end receives.
"""

import argparse
import asyncio
import json
import sys

from core.display import console, render_activity
from modules.spotify.models import AggregatedActivity
from modules.spotify.responses import resolve_activity
from modules.spotify.service import build_activity_service
from shared.config import get_settings
from shared.logging_config import configure_logging


def main(as_json: bool = False) -> int:
    """Main entry point.

    Args:
        as_json: Print the JSON payload instead of tables

    Returns:
        Process exit code (1 on a hard failure)
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    service = build_activity_service(settings)

    result = asyncio.run(
        resolve_activity(service, include_traceback=settings.is_development)
    )

    if as_json:
        print(json.dumps(result.body, indent=2, ensure_ascii=False))
    elif result.body.get("error"):
        console.print(f"[red]Error:[/red] {result.body.get('message')}")
    elif result.body.get("notConfigured"):
        console.print(f"[yellow]Not configured:[/yellow] {result.body.get('message')}")
    else:
        render_activity(AggregatedActivity.model_validate(result.body))

    return 0 if result.status_code == 200 else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Print the current Spotify activity snapshot"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw JSON payload",
    )
    args = parser.parse_args()
    sys.exit(main(as_json=args.json))
