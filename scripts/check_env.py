"""Check that a deployment's ``.env`` carries the Google OAuth configuration.

The tool loads the settings from the given file, lists any OAuth values the
login flow would still be missing, and prints the redirect URI that has to
be registered on the OAuth client in the Google Cloud console.

Example usage::

    python -m scripts.check_env --env-file /srv/calendar/.env
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from app.core.config import GoogleSettings, OAuthSettings, SecuritySettings

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5


def _load_google_settings(env_file: Path) -> GoogleSettings:
    """Load settings from ``env_file``; the process environment still takes precedence."""
    google = GoogleSettings(_env_file=env_file)
    OAuthSettings(_env_file=env_file)
    SecuritySettings(_env_file=env_file)
    return google


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the Google OAuth settings used by the calendar proxy."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the repo root).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    if not env_file.exists():
        print(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        google = _load_google_settings(env_file)
    except ValidationError as exc:
        print(
            "Settings validation failed. Invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    missing = google.missing_fields()
    if missing:
        print(
            "Google OAuth is not fully configured. Missing: " + ", ".join(missing),
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    print("Google OAuth configuration OK.")
    print(f"Register this redirect URI on the OAuth client: {google.redirect_uri}")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
