"""Mint an OAuth2 refresh token for the OAuth2 credential variant.

Run once on a machine with a browser:

    drive-upload-token --client-secrets credentials.json

then copy the printed values into the service's environment.
"""

import argparse
import pathlib
from typing import Optional, Sequence

from google_auth_oauthlib.flow import InstalledAppFlow
from loguru import logger

from .drive.client import GoogleDriveClient

DEFAULT_PORT = 3000
TIMEOUT_SECONDS = 120


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--client-secrets", default="credentials.json", type=pathlib.Path)
    parser.add_argument("--port", default=DEFAULT_PORT, type=int)
    parser.add_argument("--no-browser", action="store_true", help="print the URL only")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if not args.client_secrets.exists():
        logger.error(f"Missing {args.client_secrets}. Download the OAuth client file first.")
        return 1

    flow = InstalledAppFlow.from_client_secrets_file(
        str(args.client_secrets), GoogleDriveClient.SCOPES
    )
    try:
        # blocks on a loopback server until the consent redirect arrives
        creds = flow.run_local_server(
            port=args.port,
            open_browser=not args.no_browser,
            timeout_seconds=TIMEOUT_SECONDS,
            access_type="offline",
            prompt="consent",
        )
    except Exception as e:
        logger.error(
            f"No usable authorization within {TIMEOUT_SECONDS} seconds ({e}). Run again."
        )
        return 1

    if not getattr(creds, "refresh_token", None):
        logger.error("Google returned no refresh token. Revoke the app's access and run again.")
        return 1

    print(f"OAUTH_CLIENT_ID={creds.client_id}")
    print(f"OAUTH_CLIENT_SECRET={creds.client_secret}")
    print(f"OAUTH_REFRESH_TOKEN={creds.refresh_token}")
    logger.info("Add these values to the deployment environment, then redeploy.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
