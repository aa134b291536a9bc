"""
data_model/relays.py — relay target decided once at input normalization.

  ExplicitAddresses(urls)  one or more literal ws:// / wss:// addresses
  NamedCategory(name)      category looked up in the relay catalog
  DefaultRelays()          the configured default relay set
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias

from .errors import ConfigurationError

DEFAULT_SENTINEL = "default"

_SPLIT_RE = re.compile(r"[\s,]+")


@dataclass(frozen=True, slots=True)
class ExplicitAddresses:
    urls: tuple[str, ...]

    def describe(self) -> str:
        return ", ".join(self.urls)


@dataclass(frozen=True, slots=True)
class NamedCategory:
    name: str

    def describe(self) -> str:
        return f"category '{self.name}'"


@dataclass(frozen=True, slots=True)
class DefaultRelays:
    def describe(self) -> str:
        return "default relays"


RelayTarget: TypeAlias = ExplicitAddresses | NamedCategory | DefaultRelays


def is_relay_url(text: str) -> bool:
    return text.startswith(("ws://", "wss://"))


def parse_relay_target(text: str | None) -> RelayTarget:
    """
    Classifies a relay target string.

    Empty / "default" → DefaultRelays; ws:// or wss:// tokens → the
    literal addresses; otherwise a category name.

    Raises:
        ConfigurationError: addresses mixed with other tokens.
    """
    value = (text or "").strip()
    if not value or value.lower() == DEFAULT_SENTINEL:
        return DefaultRelays()

    tokens = [t for t in _SPLIT_RE.split(value) if t]
    urls = [t for t in tokens if is_relay_url(t)]
    if urls and len(urls) != len(tokens):
        others = ", ".join(t for t in tokens if not is_relay_url(t))
        raise ConfigurationError(
            f"Relay target mixes relay URLs with other names ({others}); "
            "use either URLs or one relays.yml category"
        )
    if urls:
        return ExplicitAddresses(tuple(dict.fromkeys(urls)))
    return NamedCategory(value)
