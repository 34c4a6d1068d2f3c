"""Progress events emitted while analyzing files."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal, Optional

from ..models.records import Classification

EventKind = Literal[
    "file_started",
    "declaration_resolved",
    "declaration_skipped",
    "declaration_failed",
    "file_failed",
    "file_completed",
]


@dataclass(frozen=True, slots=True)
class AnalysisEvent:
    kind: EventKind
    path: Path
    name: Optional[str] = None
    message: str = ""
    classification: Optional[Classification] = None


ProgressCallback = Callable[[AnalysisEvent], None]


class EventCollector:
    """Callback that keeps every event; handy in tests and for summaries."""

    def __init__(self) -> None:
        self.events: list[AnalysisEvent] = []

    def __call__(self, event: AnalysisEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> list[AnalysisEvent]:
        return [event for event in self.events if event.kind == kind]
