"""
data_model/results.py — per-unit outcomes and run reports.

Each unit attempt ends in exactly one outcome:
  Published(event_id)             accepted by at least the minimum relay count
  Failed(reason)                  retries exhausted below the minimum
  SkippedDependency(missing)      a referenced unit never got an event id

PublishReport.success is a fold over the outcome list.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, TypeAlias


@dataclass(slots=True)
class Published:
    d_tag: str
    title: str
    kind: int
    event_id: str
    accepted: list[str] = field(default_factory=list)
    rejected: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Failed:
    d_tag: str
    title: str
    kind: int
    reason: str


@dataclass(slots=True)
class SkippedDependency:
    d_tag: str
    title: str
    kind: int
    missing: list[str]

    @property
    def reason(self) -> str:
        return f"dependency unresolved: {', '.join(self.missing)}"


UnitOutcome: TypeAlias = Published | Failed | SkippedDependency


@dataclass(slots=True)
class PublishReport:
    document_title: str
    outcomes: list[UnitOutcome] = field(default_factory=list)
    relays: list[str] = field(default_factory=list)
    view_url: str | None = None
    elapsed_s: float = 0.0

    @property
    def success(self) -> bool:
        return bool(self.outcomes) and all(isinstance(o, Published) for o in self.outcomes)

    @property
    def published_events(self) -> list[dict[str, Any]]:
        return [
            {"title": o.title, "event_id": o.event_id, "kind": o.kind, "d_tag": o.d_tag}
            for o in self.outcomes
            if isinstance(o, Published)
        ]

    @property
    def errors(self) -> list[str]:
        return [
            f"{o.d_tag}: {o.reason}"
            for o in self.outcomes
            if isinstance(o, (Failed, SkippedDependency))
        ]

    @property
    def total_published(self) -> int:
        return len(self.published_events)

    @property
    def total_expected(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success":          self.success,
            "dry_run":          False,
            "document_title":   self.document_title,
            "published_events": self.published_events,
            "errors":           self.errors,
            "total_published":  self.total_published,
            "total_expected":   self.total_expected,
            "relays":           self.relays,
            "view_url":         self.view_url,
            "elapsed_s":        round(self.elapsed_s, 3),
            "outcomes":         [{"status": type(o).__name__, **asdict(o)} for o in self.outcomes],
        }


@dataclass(slots=True)
class DryRunReport:
    document_title: str
    content_level: int
    content_kind: int
    relay_target: str
    metadata: dict[str, Any]
    publish_order: list[dict[str, Any]]
    warnings: list[str] = field(default_factory=list)
    published_events: list[dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return True

    @property
    def content_units(self) -> int:
        return sum(1 for u in self.publish_order if u["type"] == "content")

    @property
    def index_units(self) -> int:
        return sum(1 for u in self.publish_order if u["type"] == "index")

    @property
    def total_events(self) -> int:
        return len(self.publish_order)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success":          True,
            "dry_run":          True,
            "document_title":   self.document_title,
            "content_level":    self.content_level,
            "content_kind":     self.content_kind,
            "relay_target":     self.relay_target,
            "metadata":         self.metadata,
            "publish_order":    self.publish_order,
            "content_sections": self.content_units,
            "index_sections":   self.index_units,
            "total_events":     self.total_events,
            "warnings":         self.warnings,
            "published_events": self.published_events,
        }
