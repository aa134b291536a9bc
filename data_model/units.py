"""
data_model/units.py — publishable units produced by the hierarchy builder.

Unit      — a content unit (carries body text) or an index unit (carries
            ordered references to other units).
Reference — pointer to a child unit by (event kind, d-tag); resolved to a
            network event id once the child is published.
PublicationPlan — everything needed to publish one document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

from .kinds import EventKind

if TYPE_CHECKING:
    from .documents import Document
    from .relays import RelayTarget


class UnitKind(StrEnum):
    CONTENT = "content"
    INDEX   = "index"


@dataclass(frozen=True, slots=True)
class Reference:
    event_kind: EventKind
    d_tag: str
    # 0-based slot among the parent's a-tags (reading order). Children are
    # published before the parent, not necessarily in this order.
    position: int


@dataclass(slots=True)
class Unit:
    kind: UnitKind
    d_tag: str
    title: str
    event_kind: EventKind
    body: str = ""
    references: list[Reference] = field(default_factory=list)
    is_root: bool = False
    event_id: str | None = None

    @property
    def is_index(self) -> bool:
        return self.kind is UnitKind.INDEX

    def reference(self, position: int) -> Reference:
        return Reference(self.event_kind, self.d_tag, position)

    def attach_event_id(self, event_id: str) -> None:
        """Records the network id; a unit is published at most once per run."""
        if self.event_id is not None:
            raise RuntimeError(f"Unit '{self.d_tag}' already has event id {self.event_id}")
        self.event_id = event_id


Metadata: TypeAlias = dict[str, str | list[str]]


@dataclass(slots=True)
class PublicationPlan:
    document: Document
    metadata: Metadata
    relay_target: RelayTarget
    content_level: int
    content_kind: EventKind
    content_units: list[Unit]
    index_units: list[Unit]
    root: Unit | None
    publish_order: list[Unit]
    warnings: list[str] = field(default_factory=list)

    @property
    def units(self) -> list[Unit]:
        return self.content_units + self.index_units
