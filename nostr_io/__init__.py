"""
nostr_io — relay selection, retries and the nostr-sdk adapter.

Public API:
  RetryExecutor                       bounded retry with backoff
  RelayCatalog, RelaySelector         relays.yml and liveness-filtered selection
  EventSigner, EventTransport         collaborator protocols
  Settings, load_settings             runtime configuration (.env + NDOC_*)

nostr_io.client (nostr-sdk) is imported explicitly by the CLI only.
"""

from .config    import Settings, load_settings, DEFAULT_RELAY
from .protocols import EventSigner, EventTransport
from .relays    import RelayCatalog, RelaySelector, ALL_CATEGORY
from .retry     import RetryExecutor

__all__ = [
    "Settings",
    "load_settings",
    "DEFAULT_RELAY",
    "EventSigner",
    "EventTransport",
    "RelayCatalog",
    "RelaySelector",
    "ALL_CATEGORY",
    "RetryExecutor",
]
