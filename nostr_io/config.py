"""
nostr_io/config.py — runtime settings.

Sources, later wins:
  1. defaults below
  2. .env in the working directory (python-dotenv; does not override
     variables already set)
  3. NDOC_* environment variables

Environment:
  NOSTR_BOT_KEY           signing key, nsec or 64-char hex (name: NDOC_KEY_ENV)
  NDOC_RELAYS_FILE        relay catalog (default: relays.yml)
  NDOC_DEFAULT_RELAY      last-resort relay
  NDOC_RELAY_FALLBACK     relay target when the document declares none
  NDOC_DEFAULT_CATEGORY   catalog category behind the "default" target
  NDOC_MIN_RELAY_SUCCESS  relays that must accept each event
  NDOC_VALIDATE           fetch events back after publishing (true/false)
  NDOC_VALIDATION_WAIT    seconds to wait before fetching back
  NDOC_PROBE_TIMEOUT      relay probe timeout (seconds)
  NDOC_SEND_TIMEOUT       send / fetch timeout (seconds)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

from dotenv import load_dotenv

from data_model.errors import ConfigurationError

DEFAULT_RELAY = "wss://thecitadel.nostr1.com"
VIEWER_URL    = "https://next-alexandria.gitcitadel.eu/events?id={event_id}"


@dataclass(frozen=True, slots=True)
class Settings:
    key_env: str                = "NOSTR_BOT_KEY"
    relays_file: Path           = Path("relays.yml")
    default_relay: str          = DEFAULT_RELAY
    relay_fallback: str         = "default"
    default_category: str       = "default"
    min_relay_success: int      = 1
    validate_after_publish: bool = True
    validation_wait_s: float    = 10.0
    probe_timeout_s: float      = 5.0
    send_timeout_s: float       = 10.0
    viewer_url: str             = VIEWER_URL

    def view_url(self, event_id: str) -> str:
        return self.viewer_url.format(event_id=event_id)

    def with_overrides(self, **changes) -> Settings:
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


_ENV_FIELDS: dict[str, str] = {
    "NDOC_KEY_ENV":           "key_env",
    "NDOC_RELAYS_FILE":       "relays_file",
    "NDOC_DEFAULT_RELAY":     "default_relay",
    "NDOC_RELAY_FALLBACK":    "relay_fallback",
    "NDOC_DEFAULT_CATEGORY":  "default_category",
    "NDOC_MIN_RELAY_SUCCESS": "min_relay_success",
    "NDOC_VALIDATE":          "validate_after_publish",
    "NDOC_VALIDATION_WAIT":   "validation_wait_s",
    "NDOC_PROBE_TIMEOUT":     "probe_timeout_s",
    "NDOC_SEND_TIMEOUT":      "send_timeout_s",
}

_TRUE  = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _coerce(var: str, raw: str, target: type | str):
    kind = target if isinstance(target, str) else target.__name__
    try:
        if kind == "int":
            value = int(raw)
            if value < 1:
                raise ValueError("must be >= 1")
            return value
        if kind == "float":
            value = float(raw)
            if value < 0:
                raise ValueError("must be >= 0")
            return value
        if kind == "bool":
            lowered = raw.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError("expected true/false")
        if kind == "Path":
            return Path(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {var}={raw!r}: {e}") from e
    return raw


def load_settings(env_file: str | Path | None = None, environ: dict[str, str] | None = None) -> Settings:
    """Builds Settings from defaults, .env and NDOC_* variables."""
    if environ is None:
        load_dotenv(env_file or Path.cwd() / ".env")
        environ = dict(os.environ)

    types = {f.name: f.type for f in fields(Settings)}
    overrides = {
        name: _coerce(var, environ[var], types[name])
        for var, name in _ENV_FIELDS.items()
        if environ.get(var)
    }
    return Settings(**overrides)
