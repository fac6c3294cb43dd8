#!/usr/bin/env python
"""Rank local photo files through the full analysis pipeline."""

from __future__ import annotations

import argparse
import asyncio
import base64
import json
import sys
from pathlib import Path
from typing import Iterable

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.config import get_settings  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.dependencies import get_photo_analysis_service  # noqa: E402
from app.schemas import Criterion, PhotoAnalysisRequest  # noqa: E402
from app.services import AnalysisRequestError  # noqa: E402

EXIT_OK = 0
EXIT_REQUEST_ERROR = 2
EXIT_RUNTIME_ERROR = 5


def _encode_photos(paths: Iterable[Path]) -> list[str]:
    return [base64.b64encode(path.read_bytes()).decode("ascii") for path in paths]


def _print_summary(payload: dict) -> None:
    for rank, result in enumerate(payload["results"], start=1):
        print(
            f"{rank:>2}. {result['fileName']:<10} {result['score']:>5.1f}  "
            f"[{result['outcome']}] {result['bestQuality']}"
        )
    metadata = payload["metadata"]
    print(
        f"\n{metadata['totalPhotos']} photos, average score {metadata['averageScore']}, "
        f"criterion {metadata['criteriaUsed']}"
    )


def run(paths: list[Path], criterion: str, *, as_json: bool) -> int:
    service = get_photo_analysis_service()
    request = PhotoAnalysisRequest(photos=_encode_photos(paths), criterion=criterion)
    try:
        response = asyncio.run(service.analyze(request))
    except AnalysisRequestError as exc:
        print(f"{exc.kind}: {exc.message}", file=sys.stderr)
        return EXIT_REQUEST_ERROR

    payload = response.model_dump(mode="json", by_alias=True)
    if as_json:
        print(json.dumps(payload, indent=2))
    else:
        _print_summary(payload)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Score and rank local photos for a dating profile."
    )
    parser.add_argument("photos", nargs="+", type=Path, help="Image files to rank.")
    parser.add_argument(
        "--criterion",
        default=Criterion.BEST.value,
        help=(
            "Evaluation lens; one of "
            + ", ".join(criterion.value for criterion in Criterion)
            + ". Unknown values fall back to 'best'."
        ),
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the full JSON envelope instead of a ranked summary.",
    )

    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    missing = [path for path in args.photos if not path.is_file()]
    if missing:
        print(
            "Photo files not found: " + ", ".join(str(path) for path in missing),
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    return run(args.photos, args.criterion, as_json=args.as_json)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
