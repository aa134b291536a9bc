"""
data_model/events.py — unsigned event drafts and signed events.

SignedEvent mirrors the NIP-01 wire object so the signer adapter, the
transport adapter and the validator all exchange the same structure.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class EventDraft:
    kind: int
    content: str
    tags: list[list[str]] = field(default_factory=list)

    def tag_value(self, name: str) -> str | None:
        for tag in self.tags:
            if tag and tag[0] == name:
                return tag[1] if len(tag) > 1 else ""
        return None


@dataclass(frozen=True, slots=True)
class SignedEvent:
    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: tuple[tuple[str, ...], ...]
    content: str
    sig: str

    def tag_values(self, name: str) -> list[tuple[str, ...]]:
        """All tags with the given name, in order."""
        return [t for t in self.tags if t and t[0] == name]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id":         self.id,
            "pubkey":     self.pubkey,
            "created_at": self.created_at,
            "kind":       self.kind,
            "tags":       [list(t) for t in self.tags],
            "content":    self.content,
            "sig":        self.sig,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SignedEvent:
        return cls(
            id         = data["id"],
            pubkey     = data["pubkey"],
            created_at = int(data["created_at"]),
            kind       = int(data["kind"]),
            tags       = tuple(tuple(str(v) for v in t) for t in data.get("tags", [])),
            content    = data.get("content", ""),
            sig        = data.get("sig", ""),
        )

    @classmethod
    def from_json(cls, raw: str) -> SignedEvent:
        return cls.from_dict(json.loads(raw))
