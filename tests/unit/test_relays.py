import pytest

from conftest import FakeTransport
from data_model.errors import ConfigurationError, NoReachableRelaysError
from data_model.relays import DefaultRelays, ExplicitAddresses, NamedCategory, parse_relay_target
from nostr_io.config import Settings
from nostr_io.relays import RelayCatalog, RelaySelector

A, B, C = "wss://a.example", "wss://b.example", "wss://c.example"
FALLBACK = "wss://fallback.example"


@pytest.fixture
def catalog():
    return RelayCatalog({"default": [A], "favorite-relays": [A, B, C], "archive": [C, A]})


@pytest.fixture
def settings():
    return Settings(default_relay=FALLBACK)


@pytest.mark.parametrize("text, expected", [
    (None, DefaultRelays()),
    ("", DefaultRelays()),
    ("Default", DefaultRelays()),
    ("favorite-relays", NamedCategory("favorite-relays")),
    (f"{A}, {B}", ExplicitAddresses((A, B))),
    (f"{A} {A}", ExplicitAddresses((A,))),
    ("ws://local:7777", ExplicitAddresses(("ws://local:7777",))),
])
def test_parse_relay_target(text, expected):
    assert parse_relay_target(text) == expected


@pytest.mark.parametrize("text", [f"{A} favorite-relays", f"archive, {B}"])
def test_urls_mixed_with_category_raise(text):
    with pytest.raises(ConfigurationError, match="mixes relay URLs"):
        parse_relay_target(text)


def test_catalog_from_file(tmp_path):
    path = tmp_path / "relays.yml"
    path.write_text(f"default:\n  - {A}\nfavorite-relays:\n  - {B}\n  - {A}\nempty:\n", encoding="utf-8")

    catalog = RelayCatalog.from_file(path)

    assert catalog.categories() == {"default": [A], "favorite-relays": [B, A], "empty": []}
    assert catalog.resolve("favorite-relays") == [B, A]
    assert catalog.resolve("all") == [A, B]
    assert "all" in catalog and "default" in catalog and "nope" not in catalog


def test_missing_catalog_is_empty(tmp_path):
    catalog = RelayCatalog.from_file(tmp_path / "absent.yml")
    assert catalog.categories() == {}
    assert catalog.source is None


@pytest.mark.parametrize("text, message", [
    ("default: [unclosed", "Invalid YAML"),
    ("- just\n- a list\n", "must be a mapping"),
    ("default: wss://a.example\n", "must be a list"),
])
def test_invalid_catalog(tmp_path, text, message):
    path = tmp_path / "relays.yml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError, match=message):
        RelayCatalog.from_file(path)


def test_unknown_category(catalog):
    with pytest.raises(ConfigurationError, match="Unknown relay category 'nope'"):
        catalog.resolve("nope")


def test_candidates(catalog, settings):
    selector = RelaySelector(FakeTransport(), catalog, settings)
    assert selector.candidates(NamedCategory("archive")) == [C, A]
    assert selector.candidates(ExplicitAddresses((B,))) == [B]
    assert selector.candidates(DefaultRelays()) == [A]

    bare = RelaySelector(FakeTransport(), RelayCatalog(), settings)
    assert bare.candidates(DefaultRelays()) == [FALLBACK]


def test_empty_category_is_a_configuration_error(settings):
    selector = RelaySelector(FakeTransport(), RelayCatalog({"empty": []}), settings)
    with pytest.raises(ConfigurationError, match="No relays configured"):
        selector.candidates(NamedCategory("empty"))


def test_select_keeps_reachable_relays(catalog, settings, out):
    transport = FakeTransport(reachable={A, C})
    selector = RelaySelector(transport, catalog, settings, out=out)

    assert selector.select(NamedCategory("favorite-relays")) == [A, C]
    assert ("probe", FALLBACK) not in transport.calls


def test_select_falls_back_to_default_relay(catalog, settings, out):
    transport = FakeTransport(reachable={FALLBACK})
    selector = RelaySelector(transport, catalog, settings, out=out)

    assert selector.select(NamedCategory("favorite-relays")) == [FALLBACK]
    assert "falling back" in out.file.getvalue()


def test_select_raises_when_nothing_answers(catalog, settings, out):
    selector = RelaySelector(FakeTransport(reachable=set()), catalog, settings, out=out)
    with pytest.raises(NoReachableRelaysError, match=FALLBACK):
        selector.select(ExplicitAddresses((A, B)))


def test_probe_errors_count_as_unreachable(catalog, settings, out):
    class Broken(FakeTransport):
        def probe(self, relay, timeout):
            if relay == A:
                raise OSError("name resolution failed")
            return super().probe(relay, timeout)

    selector = RelaySelector(Broken(), catalog, settings, out=out, verbose=True)

    assert selector.select(ExplicitAddresses((A, B))) == [B]
    text = out.file.getvalue()
    assert "name resolution failed" in text
    assert "unreachable" in text
