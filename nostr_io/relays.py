"""
nostr_io/relays.py — relay catalog and relay selection.

relays.yml maps a category name to a list of relay URLs:

    favorite-relays:
      - wss://thecitadel.nostr1.com
      - wss://nostr.land
    default:
      - wss://thecitadel.nostr1.com

The virtual category "all" is the ordered, de-duplicated union of every
category. A missing catalog file is an empty catalog.

RelaySelector turns a RelayTarget into the list of relays that answer a
liveness probe, falling back to the default relay when none does.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from rich.console import Console
from rich.markup import escape

from data_model.errors import ConfigurationError, NoReachableRelaysError
from data_model.relays import DefaultRelays, ExplicitAddresses, NamedCategory, RelayTarget

from .config import DEFAULT_RELAY, Settings
from .protocols import EventTransport

ALL_CATEGORY = "all"

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class RelayCatalog:
    def __init__(self, categories: dict[str, list[str]] | None = None, source: Path | None = None) -> None:
        self._categories = dict(categories or {})
        self.source = source

    @classmethod
    def from_file(cls, path: str | Path) -> RelayCatalog:
        """
        Loads relays.yml.

        Raises:
            ConfigurationError: invalid YAML, or a category that is not a
                                list of URLs.
        """
        path = Path(path)
        if not path.exists():
            return cls({}, source=None)

        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Relay catalog {path} must be a mapping of category -> list of URLs, "
                f"got {type(data).__name__}"
            )

        categories: dict[str, list[str]] = {}
        for name, urls in data.items():
            if urls is None:
                urls = []
            if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
                raise ConfigurationError(f"Relay category '{name}' in {path} must be a list of URLs")
            categories[str(name)] = [u.strip() for u in urls if u.strip()]
        return cls(categories, source=path)

    def categories(self) -> dict[str, list[str]]:
        return dict(self._categories)

    def __contains__(self, name: str) -> bool:
        return name == ALL_CATEGORY or name in self._categories

    def all_relays(self) -> list[str]:
        seen: dict[str, None] = {}
        for urls in self._categories.values():
            seen.update(dict.fromkeys(urls))
        return list(seen)

    def resolve(self, name: str) -> list[str]:
        if name == ALL_CATEGORY:
            return self.all_relays()
        try:
            return list(self._categories[name])
        except KeyError:
            known = ", ".join(sorted(self._categories)) or "none"
            where = self.source or "relay catalog (file not found)"
            raise ConfigurationError(
                f"Unknown relay category '{name}' in {where}. Known categories: {known}"
            ) from None


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class RelaySelector:
    def __init__(
        self,
        transport: EventTransport,
        catalog: RelayCatalog,
        settings: Settings | None = None,
        out: Console | None = None,
        verbose: bool = False,
    ) -> None:
        self._transport = transport
        self._catalog   = catalog
        self._settings  = settings or Settings()
        self._out       = out or console
        self._verbose   = verbose

    def candidates(self, target: RelayTarget) -> list[str]:
        """Relay URLs named by the target, before probing."""
        match target:
            case ExplicitAddresses(urls=urls):
                relays = list(urls)
            case NamedCategory(name=name):
                relays = self._catalog.resolve(name)
            case DefaultRelays():
                category = self._settings.default_category
                relays = (
                    self._catalog.resolve(category)
                    if category in self._catalog
                    else [self._settings.default_relay]
                )
            case _:
                raise TypeError(f"Unsupported relay target: {target!r}")
        if not relays:
            raise ConfigurationError(f"No relays configured for {target.describe()}")
        return list(dict.fromkeys(relays))

    def _probe(self, relay: str) -> bool:
        try:
            ok = self._transport.probe(relay, self._settings.probe_timeout_s)
        except Exception as e:
            ok = False
            self._out.print(f"[yellow]warn:[/yellow] probe {relay} failed: {escape(str(e))}")
        if self._verbose:
            status = "[green]reachable[/green]" if ok else "[red]unreachable[/red]"
            self._out.print(f"  {relay}  {status}")
        return ok

    def select(self, target: RelayTarget) -> list[str]:
        """
        Relays from the target that answer the probe.

        Raises:
            ConfigurationError:     the target cannot be resolved.
            NoReachableRelaysError: no candidate and not the default relay
                                    answered.
        """
        candidates = self.candidates(target)
        live = [r for r in candidates if self._probe(r)]
        if live:
            return live

        fallback = self._settings.default_relay or DEFAULT_RELAY
        self._out.print(
            f"[yellow]warn:[/yellow] none of {len(candidates)} relay(s) for "
            f"{escape(target.describe())} responded; falling back to {fallback}"
        )
        if fallback not in candidates and self._probe(fallback):
            return [fallback]
        raise NoReachableRelaysError(
            f"No reachable relays (tried {', '.join(candidates)}"
            + (f" and {fallback}" if fallback not in candidates else "")
            + "). Cannot continue."
        )
