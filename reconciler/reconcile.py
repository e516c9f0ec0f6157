#!/usr/bin/env python3
"""Reconcile Attendance - batch entry point for the matching engine

Reads a JSON batch file with the directory and the unassigned identifiers,
runs one reconciliation pass and prints the suggestions as JSON.

Batch file format:
    {
        "directory": [{"id": 1, "firstname": "Mario", "lastname": "Rossi", "email": "..."}],
        "identifiers": [{"record_id": 10, "text": "Rossi, Mario"}],
        "applied": [11, 12]
    }
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .core.models import DirectoryPerson, RawIdentifier, Suggestion
from .errors import InputFormatError
from .logging_config import configure_logging, resolve_level
from .services import FILTER_KINDS, InMemoryAssignmentTracker, SuggestionCoordinator
from .settings import ReconcilerSettings, get_settings

logger = logging.getLogger(__name__)


def load_batch(path: Path) -> tuple[list[DirectoryPerson], list[RawIdentifier], list[int]]:
    """Load directory, identifiers and applied record ids from a batch file.

    Raises:
        InputFormatError: If the file is missing, not JSON, or lacks required fields
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise InputFormatError(f"Batch file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise InputFormatError(f"Batch file is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InputFormatError("Batch file must contain a JSON object")

    try:
        directory = [
            DirectoryPerson(
                id=int(entry["id"]),
                firstname=str(entry.get("firstname") or ""),
                lastname=str(entry.get("lastname") or ""),
                email=str(entry.get("email") or ""),
            )
            for entry in data.get("directory", [])
        ]
        identifiers = [
            RawIdentifier(record_id=int(entry["record_id"]), text=str(entry.get("text") or ""))
            for entry in data.get("identifiers", [])
        ]
        applied = [int(record_id) for record_id in data.get("applied", [])]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InputFormatError(f"Malformed batch entry: {e}") from e

    return directory, identifiers, applied


def suggestion_to_dict(suggestion: Suggestion) -> dict[str, Any]:
    return {
        "record_id": suggestion.record_id,
        "person_id": suggestion.person.id,
        "person_name": suggestion.person.full_name,
        "type": suggestion.type.value,
        "priority": suggestion.priority,
        "confidence": suggestion.confidence.value,
        "score": round(suggestion.score, 4),
        "metadata": suggestion.metadata,
    }


def reconcile_batch(
    directory: list[DirectoryPerson],
    identifiers: list[RawIdentifier],
    applied: list[int],
    settings: ReconcilerSettings,
    kind: str = "all",
) -> dict[str, Any]:
    """Run one reconciliation pass and build the JSON-ready report."""
    coordinator = SuggestionCoordinator(directory, InMemoryAssignmentTracker(applied), settings)
    suggestions = coordinator.generate_suggestions(identifiers)

    ordered = coordinator.sort_by_type(identifiers, suggestions)
    visible = coordinator.filter_by_type(ordered, suggestions, kind)

    return {
        "records": [
            {
                "record_id": record.record_id,
                "text": record.text,
                "suggestion": suggestion_to_dict(suggestions[record.record_id])
                if record.record_id in suggestions
                else None,
            }
            for record in visible
        ],
        "statistics": coordinator.statistics(suggestions).as_dict(),
    }


def main() -> None:
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Suggest directory persons for unassigned attendance records")
    parser.add_argument("batch", type=Path, help="JSON batch file with directory and identifiers")
    parser.add_argument("--threshold", type=float, help="Override the email similarity threshold")
    parser.add_argument(
        "--show", choices=FILTER_KINDS, default="all", help="Only print records with this suggestion type"
    )
    parser.add_argument("--output", type=Path, help="Write the JSON report to this file instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    try:
        settings = get_settings()
        if args.threshold is not None:
            settings = ReconcilerSettings(**{**settings.model_dump(), "email_similarity_threshold": args.threshold})
    except ValidationError as e:
        parser.error(str(e))

    configure_logging(source="reconcile", level=resolve_level(settings.log_level, args.debug))

    try:
        directory, identifiers, applied = load_batch(args.batch)
    except InputFormatError as e:
        logger.error(str(e))
        sys.exit(2)

    logger.info(f"Loaded {len(directory)} directory persons and {len(identifiers)} identifiers")
    report = reconcile_batch(directory, identifiers, applied, settings, args.show)

    output = json.dumps(report, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info(f"Report written to {args.output}")
    else:
        print(output)


if __name__ == "__main__":
    main()
