"""Check that a deployment ``.env`` can run the photo analysis service.

``check`` loads ``AppSettings`` from the file and fails when values are
malformed or when ``GEMINI_API_KEY`` is absent, since every analysis request
would then end in an ``internal`` error. ``record`` additionally stores a
SHA256 baseline of the file and ``verify`` compares against it::

    python -m scripts.check_env record --env-file /srv/photo-ranker/.env \
        --hash-file /srv/photo-ranker/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from app.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5

REQUIRED_SETTINGS: dict[str, Callable[[AppSettings], object]] = {
    "GEMINI_API_KEY": lambda settings: settings.gemini.api_key,
}


def _validate(env_file: Path) -> int:
    if not env_file.is_file():
        print(f"Environment file {env_file} does not exist.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    _load_env_file(str(env_file))
    try:
        settings = AppSettings()  # type: ignore[call-arg]
    except ValidationError as exc:
        print(f"Invalid settings in {env_file}:\n{exc.json(indent=2)}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    missing = [name for name, read in REQUIRED_SETTINGS.items() if not read(settings)]
    if missing:
        print("Required settings are missing: " + ", ".join(missing), file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    return EXIT_OK


def _checksum(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _record(env_file: Path, hash_file: Path) -> int:
    checksum = _checksum(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify(env_file: Path, hash_file: Path) -> int:
    if not hash_file.is_file():
        print(
            f"Checksum baseline {hash_file} is missing; run 'record' first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _checksum(env_file)
    if expected != actual:
        print(
            f"Environment checksum mismatch (expected {expected}, got {actual}).",
            file=sys.stderr,
        )
        return EXIT_CHECKSUM_ERROR
    print("Environment checksum OK.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    env_args = argparse.ArgumentParser(add_help=False)
    env_args.add_argument("--env-file", type=Path, default=Path(".env"))
    hash_args = argparse.ArgumentParser(add_help=False)
    hash_args.add_argument("--hash-file", type=Path, required=True)

    parser = argparse.ArgumentParser(
        description="Validate photo service settings and detect .env drift."
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("check", parents=[env_args], help="Validate settings only.")
    commands.add_parser(
        "record", parents=[env_args, hash_args], help="Validate and store a baseline."
    )
    commands.add_parser(
        "verify", parents=[env_args, hash_args], help="Validate and compare to the baseline."
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    status = _validate(args.env_file)
    if status != EXIT_OK or args.command == "check":
        return status
    if args.command == "record":
        return _record(args.env_file, args.hash_file)
    return _verify(args.env_file, args.hash_file)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
