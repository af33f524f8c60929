"""Verify that the Shopify integration settings in a ``.env`` file are usable.

Commands:

* ``check``  - load ``AppSettings`` from the file and print the resolved shop
  domain and OAuth callback so they can be compared with the app setup in the
  Shopify partner dashboard.
* ``record`` - validate, then store the file's SHA256 next to it.
* ``verify`` - validate, then compare against the recorded SHA256 to catch
  unexpected edits before restarting the service.

Example::

    python -m scripts.check_env record --env-file /srv/consent-bridge/.env \
        --hash-file /srv/consent-bridge/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path

from pydantic import ValidationError

from consent_bridge.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5


def _compute_hash(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    """Build settings from ``env_file``; values already in the environment win."""
    _load_env_file(str(env_file))
    return AppSettings(_env_file=str(env_file))  # type: ignore[call-arg]


def _describe(settings: AppSettings) -> int:
    shopify = settings.shopify
    print(f"Shop domain:     {shopify.shop_domain}")
    print(f"OAuth callback:  {shopify.redirect_uri}")
    print(f"API version:     {shopify.api_version}")
    print(f"Scopes:          {shopify.scopes}")
    print(f"HMAC checks:     {'on' if shopify.verify_hmac else 'off'}")
    return EXIT_OK


def _record_checksum(env_file: Path, hash_file: Path) -> int:
    checksum = _compute_hash(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify_checksum(env_file: Path, hash_file: Path) -> int:
    if not hash_file.exists():
        print(
            f"Checksum file {hash_file} is missing; run 'record' first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _compute_hash(env_file)
    if expected == actual:
        print("Environment checksum OK.")
        return EXIT_OK

    print(
        "Environment checksum mismatch!\n"
        f"  expected: {expected}\n"
        f"  actual:   {actual}",
        file=sys.stderr,
    )
    return EXIT_CHECKSUM_ERROR


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate Shopify settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text, needs_hash in (
        ("check", "Validate settings and print the resolved Shopify values.", False),
        ("record", "Validate settings and store the checksum baseline.", True),
        ("verify", "Validate settings and compare with the checksum baseline.", True),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument("--env-file", default=".env", type=Path)
        if needs_hash:
            subparser.add_argument("--hash-file", required=True, type=Path)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    if not env_file.exists():
        print(f"Environment file {env_file} does not exist.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        settings = _load_settings(env_file)
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    if args.command == "record":
        return _record_checksum(env_file, args.hash_file)
    if args.command == "verify":
        return _verify_checksum(env_file, args.hash_file)
    return _describe(settings)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
