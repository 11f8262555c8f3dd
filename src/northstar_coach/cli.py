"""CLI entry point for offline coaching evaluation of a snapshot document."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Sequence

from .config import Config
from .logging import setup_logging
from .service import CoachingService
from .snapshot import build_com_b_snapshot

logger = logging.getLogger(__name__)

EXIT_BAD_INPUT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="northstar-coach",
        description="Compute COM-B recommendations and the adaptive coaching profile for one user.",
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Path to a JSON document with user/snapshot data ('-' reads stdin).",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of recommended actions (clamped to 1-4).",
    )
    parser.add_argument(
        "--focus-pillar",
        default=None,
        help="Pillar id to use as the primary focus when present.",
    )
    parser.add_argument(
        "--pillar",
        default=None,
        help="Print only the adaptive plan for this pillar id.",
    )
    parser.add_argument(
        "--context",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Print the prompt-layer context instead of the full evaluation.",
    )
    parser.add_argument(
        "--today",
        default=None,
        help="Reference date (YYYY-MM-DD) for logging-gap days when assembling from entries.",
    )
    return parser


def _load_document(source: str) -> dict[str, Any]:
    if source == "-":
        document = json.load(sys.stdin)
    else:
        document = json.loads(Path(source).read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise ValueError("input document must be a JSON object")
    return document


def _snapshot_from_document(document: dict[str, Any], today: date | None) -> Any:
    """Use an explicit snapshot when given, otherwise assemble one from raw documents."""
    if document.get("snapshot") is not None:
        return document["snapshot"]
    return build_com_b_snapshot(
        document.get("user"),
        document.get("accessible_pillars"),
        pillar_scores=document.get("pillar_scores"),
        entries=document.get("entries"),
        habits=document.get("habits"),
        today=today,
    )


def run(args: argparse.Namespace, service: CoachingService) -> int:
    try:
        document = _load_document(args.input)
        today = date.fromisoformat(args.today) if args.today else None
    except (OSError, ValueError) as exc:
        logger.error("Could not read coaching input %s: %s", args.input, exc)
        return EXIT_BAD_INPUT

    evaluation = service.evaluate(
        document.get("user"),
        _snapshot_from_document(document, today),
        document.get("accessible_pillars"),
        focus_pillar_id=args.focus_pillar,
        limit=args.limit,
    )

    if args.pillar:
        plan = service.pillar_plan(args.pillar, evaluation.profile)
        result: Any = plan.to_dict() if plan else None
    elif args.context:
        result = evaluation.context
    else:
        result = evaluation.to_dict()

    print(json.dumps(result, indent=2, sort_keys=True))
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = Config.from_env()
    setup_logging(config.log_format, config.log_level)
    raise SystemExit(run(args, CoachingService.from_config(config)))


if __name__ == "__main__":
    main()
