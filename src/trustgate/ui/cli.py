# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from dotenv import load_dotenv

from trustgate.app import (
    advance_event,
    event_history,
    extract_entities,
    extract_relationships,
    ingest_item,
    score_event,
    store_artifact,
)
from trustgate.config import ConfigurationError, configure_logging
from trustgate.domain.errors import ClaimValidationError, TrustPipelineError
from trustgate.domain.evidence import EvidenceSubmission, build_source
from trustgate.domain.fingerprint import compute_fingerprint
from trustgate.domain.model import EventStatus, SourceType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evidence-based trust and publication gating")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Record a fetched item and link it to its event")
    ingest.add_argument("--url", required=True, help="URL the item was fetched from")
    ingest.add_argument("--title", required=True, help="Item title as published")
    ingest.add_argument(
        "--source-type",
        required=True,
        type=str.upper,
        choices=[member.value for member in SourceType],
        help="Feed the item came from",
    )
    ingest.add_argument("--source-id", required=True, help="Identifier within the feed")
    ingest.add_argument("--content-file", type=Path, help="File holding the item body")
    ingest.add_argument("--author", type=str, help="Author of the item")
    ingest.add_argument("--published-at", type=str, help="ISO-8601 publication timestamp")
    ingest.add_argument(
        "--occurred-at",
        type=str,
        help="ISO-8601 timestamp of the event (defaults to the publication time)",
    )

    score = subparsers.add_parser("score", help="Score confidence and apply the publish gate")
    score.add_argument("event_id", type=str)

    entities = subparsers.add_parser("entities", help="Store an entity extraction payload")
    entities.add_argument("event_id", type=str)
    entities.add_argument("payload", type=str, help="JSON file, or - for stdin")

    relationships = subparsers.add_parser(
        "relationships", help="Gate and store a relationship extraction payload"
    )
    relationships.add_argument("event_id", type=str)
    relationships.add_argument("payload", type=str, help="JSON file, or - for stdin")

    artifact = subparsers.add_parser("artifact", help="Store a new artifact version")
    artifact.add_argument("event_id", type=str)
    artifact.add_argument("artifact_type", type=str.upper)
    artifact.add_argument("payload", type=str, help="JSON file, or - for stdin")
    artifact.add_argument("--model", type=str, help="Model that produced the artifact")
    artifact.add_argument("--prompt-version", type=str, help="Prompt version used")

    advance = subparsers.add_parser("advance", help="Manually move an event along the pipeline")
    advance.add_argument("event_id", type=str)
    advance.add_argument(
        "status",
        type=str.upper,
        choices=[EventStatus.ENRICHED.value, EventStatus.VERIFIED.value, EventStatus.BLOCKED.value],
    )
    advance.add_argument("--reason", required=True, help="Why the status changes")
    advance.add_argument("--changed-by", type=str, help="Operator or job name")

    history = subparsers.add_parser("history", help="Show an event's status history")
    history.add_argument("event_id", type=str)

    classify = subparsers.add_parser("classify", help="Canonicalize a URL and show its trust tier")
    classify.add_argument("url", type=str)

    fingerprint = subparsers.add_parser("fingerprint", help="Compute an event fingerprint")
    fingerprint.add_argument("--title", required=True)
    fingerprint.add_argument("--occurred-at", required=True)
    fingerprint.add_argument(
        "--source-type",
        required=True,
        type=str.upper,
        choices=[member.value for member in SourceType],
    )

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _read_json_object(source: str) -> dict[str, Any]:
    try:
        loaded = json.loads(_read_text(source))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {source}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ValueError(f"Expected a JSON object in {source}")
    return loaded


def _run(args: argparse.Namespace) -> int:  # noqa: C901, PLR0911, PLR0912
    if args.command == "classify":
        source = build_source(args.url)
        print(f"{source.canonical_url}\t{source.domain}\t{source.trust_tier}")
        return 0

    if args.command == "fingerprint":
        print(
            compute_fingerprint(
                args.title, _parse_iso_datetime(args.occurred_at), SourceType(args.source_type)
            )
        )
        return 0

    if args.command == "ingest":
        published_at = _parse_iso_datetime(args.published_at) if args.published_at else None
        occurred_at = _parse_iso_datetime(args.occurred_at) if args.occurred_at else None
        submission = EvidenceSubmission(
            url=args.url,
            title=args.title,
            source_type=SourceType(args.source_type),
            source_id=args.source_id,
            content=args.content_file.read_text(encoding="utf-8") if args.content_file else None,
            author=args.author,
            published_at=published_at,
        )
        link = ingest_item(submission, occurred_at=occurred_at)
        print(f"{link.event_id}\t{'created' if link.created else 'linked'}\t{link.fingerprint}")
        return 0

    event_id = _parse_uuid(args.event_id)

    if args.command == "score":
        result = score_event(event_id)
        if result is None:
            return _not_found(event_id)
        print(f"{result.status}\t{result.confidence}\t{result.source_count} source(s)")
        if result.missing_artifacts:
            print(f"missing: {', '.join(result.missing_artifacts)}")
        return 0

    if args.command == "entities":
        created = extract_entities(event_id, _read_text(args.payload))
        if created is None:
            return _not_found(event_id)
        print(f"{created} new mention(s)")
        return 0

    if args.command == "relationships":
        gated = extract_relationships(event_id, _read_text(args.payload))
        if gated is None:
            return _not_found(event_id)
        print(
            f"approved={gated.approved} quarantined={gated.quarantined} skipped={gated.skipped}"
        )
        return 0

    if args.command == "artifact":
        stored = store_artifact(
            event_id,
            args.artifact_type,
            _read_json_object(args.payload),
            model_used=args.model,
            prompt_version=args.prompt_version,
        )
        if stored is None:
            return _not_found(event_id)
        print(f"{stored.artifact_type} v{stored.version}")
        return 0

    if args.command == "advance":
        event = advance_event(
            event_id,
            EventStatus(args.status),
            reason=args.reason,
            changed_by=args.changed_by,
        )
        if event is None:
            return _not_found(event_id)
        print(event.status)
        return 0

    if args.command == "history":
        report = event_history(event_id)
        if report is None:
            return _not_found(event_id)
        print(f"{report.status}\tconfidence={report.confidence}\tsources={report.source_count}")
        for change in report.history:
            print(
                f"{change.changed_at.isoformat()}\t{change.from_status or '-'} -> "
                f"{change.to_status}\t{change.changed_by or '-'}\t{change.reason}"
            )
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


def _not_found(event_id: UUID) -> int:
    print(f"Error: event {event_id} not found", file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _run(parsed_args)
    except (ValueError, ClaimValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except (TrustPipelineError, ConfigurationError) as exc:
        log.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
