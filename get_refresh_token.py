#!/usr/bin/env python
"""
Obtain a Spotify refresh token for the proxy.

Run once after creating the Spotify app. Opens the consent page, takes
the URL Spotify redirected to (or the bare code) and prints the value to
put in SPOTIFY_REFRESH_TOKEN.

Usage:
    python get_refresh_token.py
    python get_refresh_token.py --no-browser
    python get_refresh_token.py --code <authorization code>
"""

import argparse
import asyncio
import secrets
import sys
import webbrowser
from urllib.parse import parse_qs, urlparse

import httpx

from core.display import console
from modules.spotify.auth import TokenExchange, build_authorize_url
from modules.spotify.exceptions import TokenExchangeError
from modules.spotify.models import SpotifyCredentials
from shared.config import get_settings


def extract_code(pasted: str, expected_state: str | None = None) -> str:
    """Pull the authorization code out of a pasted redirect URL.

    A value that is not a URL is treated as the code itself.

    Raises:
        ValueError: If the URL carries an error, no code, or a wrong state
    """
    pasted = pasted.strip()
    if not pasted.startswith("http"):
        return pasted

    query = parse_qs(urlparse(pasted).query)
    if "error" in query:
        raise ValueError(f"Spotify returned an error: {query['error'][0]}")
    if expected_state and query.get("state", [None])[0] != expected_state:
        raise ValueError("State mismatch; restart the flow")
    codes = query.get("code")
    if not codes:
        raise ValueError("No 'code' parameter in the pasted URL")
    return codes[0]


async def exchange(
    credentials: SpotifyCredentials,
    code: str,
    redirect_uri: str,
    token_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict:
    async with httpx.AsyncClient(timeout=30.0, transport=transport) as http:
        return await TokenExchange(credentials, http, token_url).exchange_authorization_code(
            code, redirect_uri
        )


def main():
    parser = argparse.ArgumentParser(description="Obtain a Spotify refresh token")
    parser.add_argument("--redirect-uri", type=str, help="Redirect URI registered on the Spotify app")
    parser.add_argument("--code", type=str, help="Authorization code (skips the browser step)")
    parser.add_argument("--no-browser", action="store_true", help="Print the consent URL only")
    args = parser.parse_args()

    settings = get_settings()
    if not settings.spotify_client_id or not settings.spotify_client_secret:
        console.print("[red]Error:[/red] Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET first.")
        sys.exit(1)

    redirect_uri = args.redirect_uri or settings.spotify_redirect_uri
    credentials = SpotifyCredentials(
        client_id=settings.spotify_client_id,
        client_secret=settings.spotify_client_secret,
    )

    code = args.code
    if not code:
        state = secrets.token_urlsafe(16)
        url = build_authorize_url(
            settings.spotify_client_id,
            redirect_uri,
            state=state,
            authorize_url=settings.spotify_authorize_url,
        )
        console.print(f"[bold]Open this URL and approve access:[/bold]\n{url}\n")
        if not args.no_browser:
            webbrowser.open(url)

        pasted = console.input("[bold]Paste the full URL you were redirected to:[/bold] ")
        try:
            code = extract_code(pasted, expected_state=state)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)

    try:
        tokens = asyncio.run(
            exchange(credentials, code, redirect_uri, settings.spotify_token_url)
        )
    except TokenExchangeError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    refresh_token = tokens.get("refresh_token")
    if not refresh_token:
        console.print("[red]Error:[/red] Spotify did not return a refresh token. Repeat the consent step.")
        sys.exit(1)

    console.print("\n[bold green]Add this to your environment:[/bold green]")
    print(f"SPOTIFY_REFRESH_TOKEN={refresh_token}")


if __name__ == "__main__":
    main()
