"""Shared fakes: signer, transport and sleep recorder. Nothing here touches the network."""

from __future__ import annotations

import hashlib
import io
import json
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from data_model.events import EventDraft, SignedEvent

PUBKEY = "ab" * 32


class FakeSigner:
    """Signs with a fixed pubkey; ids follow the NIP-01 serialization."""

    def __init__(self, pubkey: str = PUBKEY) -> None:
        self.pubkey = pubkey
        self.signed: list[SignedEvent] = []

    def public_key(self) -> str:
        return self.pubkey

    def sign(self, draft: EventDraft) -> SignedEvent:
        created_at = 1_700_000_000 + len(self.signed)
        payload = json.dumps(
            [0, self.pubkey, created_at, draft.kind, draft.tags, draft.content],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        event = SignedEvent(
            id         = hashlib.sha256(payload.encode("utf-8")).hexdigest(),
            pubkey     = self.pubkey,
            created_at = created_at,
            kind       = draft.kind,
            tags       = tuple(tuple(t) for t in draft.tags),
            content    = draft.content,
            sig        = "00" * 64,
        )
        self.signed.append(event)
        return event


class FakeTransport:
    """
    In-memory relays.

    reachable    relays that answer probes (None = all)
    reject       relay -> error message for every event
    reject_d     d-tags whose events every relay rejects
    fail_sends   number of send() calls that raise ConnectionError first
    """

    def __init__(
        self,
        reachable: set[str] | None = None,
        reject: dict[str, str] | None = None,
        reject_d: set[str] | None = None,
        fail_sends: int = 0,
    ) -> None:
        self.reachable  = reachable
        self.reject     = reject or {}
        self.reject_d   = reject_d or set()
        self.fail_sends = fail_sends
        self.store: dict[str, dict[str, SignedEvent]] = {}
        self.calls: list[tuple] = []

    def probe(self, relay: str, timeout: float) -> bool:
        self.calls.append(("probe", relay))
        return self.reachable is None or relay in self.reachable

    def send(self, event: SignedEvent, relays: list[str]) -> dict[str, str | None]:
        self.calls.append(("send", event.id, tuple(relays)))
        if self.fail_sends > 0:
            self.fail_sends -= 1
            raise ConnectionError("connection reset by relay")

        d_tag = next((t[1] for t in event.tags if t[0] == "d"), "")
        results: dict[str, str | None] = {}
        for relay in relays:
            if relay in self.reject:
                results[relay] = self.reject[relay]
            elif d_tag in self.reject_d:
                results[relay] = "blocked: rejected by policy"
            else:
                results[relay] = None
                self.store.setdefault(relay, {})[event.id] = event
        return results

    def fetch(self, event_id: str, relay: str) -> SignedEvent | None:
        self.calls.append(("fetch", event_id, relay))
        return self.store.get(relay, {}).get(event_id)

    def sends(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "send"]


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def out() -> Console:
    """Console writing to a buffer; read it with out.file.getvalue()."""
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
