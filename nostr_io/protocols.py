"""
nostr_io/protocols.py — the two collaborators the publisher talks to.

EventSigner    holds the signing key; never exposes it.
EventTransport sends, fetches and probes over relay connections.

Both are implemented on top of nostr-sdk in nostr_io/client.py; tests use
in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from data_model.events import EventDraft, SignedEvent


class EventSigner(Protocol):
    def public_key(self) -> str:
        """Hex-encoded public key of the signing identity."""
        ...

    def sign(self, draft: EventDraft) -> SignedEvent:
        ...


class EventTransport(Protocol):
    def probe(self, relay: str, timeout: float) -> bool:
        """True when the relay answers a minimal read-only query."""
        ...

    def send(self, event: SignedEvent, relays: list[str]) -> dict[str, str | None]:
        """Sends to every relay; maps relay -> None (accepted) or an error message."""
        ...

    def fetch(self, event_id: str, relay: str) -> SignedEvent | None:
        """Fetches one event by id; None when the relay does not have it."""
        ...
