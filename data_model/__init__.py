"""
data_model — data structures shared by the parser, builder and publisher.

Usage:
  from data_model import Document, Unit, EventKind, ...

Modules:
  documents — Dialect, Section, Document, detect_dialect
  kinds     — EventKind, parse_event_kind, KIND_INFO, CONTENT_KINDS
  units     — UnitKind, Reference, Unit, Metadata, PublicationPlan
  events    — EventDraft, SignedEvent
  relays    — ExplicitAddresses, NamedCategory, DefaultRelays, RelayTarget
  results   — Published, Failed, SkippedDependency, PublishReport, DryRunReport
  errors    — StructuralError, ConfigurationError, CircularDependencyError, ...
"""

from .documents import (
    Dialect,
    Section,
    Document,
    detect_dialect,
)
from .kinds import (
    EventKind,
    KIND_ALIASES,
    KIND_INFO,
    CONTENT_KINDS,
    parse_event_kind,
)
from .units import (
    UnitKind,
    Reference,
    Unit,
    Metadata,
    PublicationPlan,
)
from .events import (
    EventDraft,
    SignedEvent,
)
from .relays import (
    ExplicitAddresses,
    NamedCategory,
    DefaultRelays,
    RelayTarget,
    parse_relay_target,
    is_relay_url,
)
from .results import (
    Published,
    Failed,
    SkippedDependency,
    UnitOutcome,
    PublishReport,
    DryRunReport,
)
from .errors import (
    StructuralError,
    ConfigurationError,
    CircularDependencyError,
    NoReachableRelaysError,
    PublishError,
    EventNotConfirmedError,
)

__all__ = [
    # documents
    "Dialect",
    "Section",
    "Document",
    "detect_dialect",
    # kinds
    "EventKind",
    "KIND_ALIASES",
    "KIND_INFO",
    "CONTENT_KINDS",
    "parse_event_kind",
    # units
    "UnitKind",
    "Reference",
    "Unit",
    "Metadata",
    "PublicationPlan",
    # events
    "EventDraft",
    "SignedEvent",
    # relays
    "ExplicitAddresses",
    "NamedCategory",
    "DefaultRelays",
    "RelayTarget",
    "parse_relay_target",
    "is_relay_url",
    # results
    "Published",
    "Failed",
    "SkippedDependency",
    "UnitOutcome",
    "PublishReport",
    "DryRunReport",
    # errors
    "StructuralError",
    "ConfigurationError",
    "CircularDependencyError",
    "NoReachableRelaysError",
    "PublishError",
    "EventNotConfirmedError",
]
