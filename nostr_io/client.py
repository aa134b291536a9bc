"""
nostr_io/client.py — EventSigner and EventTransport on top of nostr-sdk.

The only module that imports nostr_sdk. Every network call opens its own
Client, runs to completion under asyncio.run() and disconnects, so the
rest of the program stays synchronous and single-threaded.

Public API:
  NostrSdkSigner(keys)               EventSigner
  NostrSdkTransport(timeout)         EventTransport
  load_signer(settings)              -> NostrSdkSigner (key from the environment)
"""

from __future__ import annotations

import asyncio
import os
from datetime import timedelta

from nostr_sdk import Client, Event, EventBuilder, EventId, Filter, Keys, Kind, Tag

from data_model.errors import ConfigurationError
from data_model.events import EventDraft, SignedEvent

from .config import Settings

# Kinds requested by the liveness probe.
PROBE_KINDS = (1, 30023, 30040, 30041)


def _norm(url: object) -> str:
    return str(url).rstrip("/")


# ---------------------------------------------------------------------------
# Signing
# ---------------------------------------------------------------------------

class NostrSdkSigner:
    def __init__(self, keys: Keys) -> None:
        self._keys = keys

    @classmethod
    def from_secret(cls, secret: str) -> NostrSdkSigner:
        """Accepts an nsec bech32 string or 64-char hex."""
        return cls(Keys.parse(secret.strip()))

    def public_key(self) -> str:
        return self._keys.public_key().to_hex()

    def sign(self, draft: EventDraft) -> SignedEvent:
        builder = EventBuilder(Kind(draft.kind), draft.content).tags(
            [Tag.parse(list(t)) for t in draft.tags]
        )
        event = builder.sign_with_keys(self._keys)
        return SignedEvent.from_json(event.as_json())


def load_signer(settings: Settings) -> NostrSdkSigner:
    """
    Reads the signing key from the environment variable named by
    settings.key_env.

    Raises:
        ConfigurationError: variable missing or not a valid key.
    """
    secret = os.getenv(settings.key_env)
    if not secret:
        raise ConfigurationError(
            f"No signing key. Set {settings.key_env} (nsec or 64-char hex) "
            f"in the environment or in .env"
        )
    try:
        return NostrSdkSigner.from_secret(secret)
    except Exception as e:
        # the key itself is never echoed
        raise ConfigurationError(f"Invalid signing key in {settings.key_env}: {type(e).__name__}") from None


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class NostrSdkTransport:
    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    async def _client(self, relays: list[str]) -> Client:
        client = Client()
        for relay in relays:
            await client.add_relay(relay)
        await client.connect()
        return client

    # -- probe ---------------------------------------------------------------

    async def _probe(self, relay: str, timeout: float) -> bool:
        client = await self._client([relay])
        try:
            query = Filter().kinds([Kind(k) for k in PROBE_KINDS]).limit(1)
            await client.fetch_events_from([relay], query, timedelta(seconds=timeout))
            return (await client.relay(relay)).is_connected()
        finally:
            await client.disconnect()

    def probe(self, relay: str, timeout: float) -> bool:
        return asyncio.run(self._probe(relay, timeout))

    # -- send ----------------------------------------------------------------

    async def _send(self, event: SignedEvent, relays: list[str]) -> dict[str, str | None]:
        client = await self._client(relays)
        try:
            output = await client.send_event_to(relays, Event.from_json(event.to_json()))
        finally:
            await client.disconnect()

        accepted = {_norm(url) for url in output.success}
        failed   = {_norm(url): str(msg) for url, msg in output.failed.items()}
        return {
            relay: None if _norm(relay) in accepted else failed.get(_norm(relay), "no response")
            for relay in relays
        }

    def send(self, event: SignedEvent, relays: list[str]) -> dict[str, str | None]:
        return asyncio.run(self._send(event, relays))

    # -- fetch ---------------------------------------------------------------

    async def _fetch(self, event_id: str, relay: str) -> SignedEvent | None:
        client = await self._client([relay])
        try:
            query = Filter().id(EventId.parse(event_id)).limit(1)
            events = await client.fetch_events_from([relay], query, timedelta(seconds=self.timeout))
        finally:
            await client.disconnect()

        for found in events.to_vec():
            return SignedEvent.from_json(found.as_json())
        return None

    def fetch(self, event_id: str, relay: str) -> SignedEvent | None:
        return asyncio.run(self._fetch(event_id, relay))
