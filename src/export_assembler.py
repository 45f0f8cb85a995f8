"""
Export Assembler

Wraps the mapped activities with run metadata into the document the
portfolio tracker imports, and reads such documents back.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import constants as const
from activity import CanonicalActivity


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportDocument:
    generated_at: datetime
    activities: tuple[CanonicalActivity, ...] = field(default_factory=tuple)
    version: str = const.SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": {"date": self.generated_at.isoformat(), "version": self.version},
            "activities": [activity.to_dict() for activity in self.activities],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExportDocument":
        meta = data.get("meta", {})
        return cls(
            generated_at=datetime.fromisoformat(meta["date"]),
            activities=tuple(CanonicalActivity.from_dict(a) for a in data.get("activities", [])),
            version=meta.get("version", const.SCHEMA_VERSION),
        )


def assemble(activities: list[CanonicalActivity], generated_at: datetime | None = None) -> ExportDocument:
    """
    Build the export document for a run.

    Args:
        activities: Activities in input order
        generated_at: Generation timestamp (defaults to now, UTC)
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    return ExportDocument(generated_at=generated_at, activities=tuple(activities))


def to_json(document: ExportDocument, indent: int | None = None) -> str:
    return json.dumps(document.to_dict(), indent=indent, ensure_ascii=False)


def from_json(text: str) -> ExportDocument:
    return ExportDocument.from_dict(json.loads(text))


def split(document: ExportDocument, size: int | None = None) -> list[ExportDocument]:
    """
    Split a document into chunks of at most `size` activities.

    Every chunk keeps the metadata of the original document. An empty
    document yields a single empty chunk.
    """
    size = size or const.SPLIT_SIZE
    if size < 1:
        raise ValueError("Chunk size must be positive")

    activities = document.activities
    if not activities:
        return [document]

    return [
        ExportDocument(generated_at=document.generated_at, activities=activities[i:i + size],
                       version=document.version)
        for i in range(0, len(activities), size)
    ]


def output_filename(broker: str, index: int | None = None, when: datetime | None = None) -> str:
    # tracker-<broker>[-<n>]-YYYYMMDDHHMMSS.json
    when = when or datetime.now()
    part = f"-{index}" if index is not None else ""
    return f"tracker-{broker}{part}-{when.strftime('%Y%m%d%H%M%S')}.json"


def write(document: ExportDocument, path: str) -> str:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(to_json(document))
    logger.info(f"Wrote {len(document.activities)} activities to {path}")
    return path
