#!/usr/bin/env python3
"""Store or remove the quote provider API keys in the OS keychain.

Reads ``FINNHUB_API_KEY`` and ``ALPHAVANTAGE_API_KEY`` from the backend
``.env`` file and stores each non-empty value via ``keyring``. Settings
read the keychain before the environment, so the keys can then be
removed from ``.env``. ``--remove`` deletes both keys from the keychain.

Usage:
    python -m scripts.setup_api_keys                  # store keys from .env
    python -m scripts.setup_api_keys --env-file path  # alternate .env
    python -m scripts.setup_api_keys --remove         # delete stored keys
"""

import argparse
import sys
from pathlib import Path

from dotenv import dotenv_values

from services.credential_manager import (
    CREDENTIAL_KEYS,
    delete_credential,
    get_credential,
    set_credential,
)


def store_from_env(env_path: Path) -> dict[str, list[str]]:
    """Copy non-empty provider keys from ``env_path`` into the keychain.

    Returns:
        Keys grouped under ``stored``, ``unchanged``, ``missing`` and ``failed``.
    """
    if not env_path.exists():
        print(f"No .env file found at {env_path}")
        sys.exit(1)

    values = dotenv_values(env_path)
    summary: dict[str, list[str]] = {
        "stored": [],
        "unchanged": [],
        "missing": [],
        "failed": [],
    }

    for key in sorted(CREDENTIAL_KEYS):
        value = values.get(key)
        if not value or value.strip().lower() == "demo":
            summary["missing"].append(key)
        elif get_credential(key) == value:
            summary["unchanged"].append(key)
        elif set_credential(key, value):
            summary["stored"].append(key)
        else:
            summary["failed"].append(key)

    print()
    print("=" * 60)
    print("API Key Setup")
    print("=" * 60)
    for label, group in (
        ("Stored in keychain", "stored"),
        ("Already in keychain", "unchanged"),
        ("Skipped (empty, demo or missing in .env)", "missing"),
        ("Failed", "failed"),
    ):
        if summary[group]:
            print(f"\n  {label} ({len(summary[group])}):")
            for key in summary[group]:
                print(f"    - {key}")
    print()
    return summary


def remove_all() -> list[str]:
    """Delete every provider key from the keychain; returns the removed keys."""
    removed = [key for key in sorted(CREDENTIAL_KEYS) if delete_credential(key)]
    print(f"Removed {len(removed)} key(s) from keychain")
    for key in removed:
        print(f"    - {key}")
    return removed


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Store quote provider API keys in the OS keychain"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(__file__).parent.parent / ".env",
        help="Path to .env file (default: backend/.env)",
    )
    parser.add_argument(
        "--remove",
        action="store_true",
        help="Delete the stored keys instead of storing them",
    )
    args = parser.parse_args(argv)

    if args.remove:
        remove_all()
    else:
        store_from_env(args.env_file)


if __name__ == "__main__":
    main()
