"""Signer and transport for CLI commands — key read from the environment (.env)."""

from __future__ import annotations

from nostr_io.config import Settings
from nostr_io.protocols import EventSigner, EventTransport


def get_signer(settings: Settings) -> EventSigner:
    from nostr_io.client import load_signer
    return load_signer(settings)


def get_transport(settings: Settings) -> EventTransport:
    from nostr_io.client import NostrSdkTransport
    return NostrSdkTransport(timeout=settings.send_timeout_s)
