"""End-to-end runs of publish_document with in-memory signer and relays."""

import pytest

from conftest import FakeSigner, FakeTransport
from data_model.errors import ConfigurationError, NoReachableRelaysError, StructuralError
from data_model.results import DryRunReport, PublishReport
from nostr_io.config import Settings
from nostr_io.relays import RelayCatalog
from publisher import plan_document, publish_document

A, B, C = "wss://a.example", "wss://b.example", "wss://c.example"

GUIDE = """\
= Field Guide
Jane Doe <jane@example.com>
v1.0, 2024-05-01
:summary: Everything about fields
:keywords: nature, guide
:type: book
:relays: favorite-relays

Welcome to the guide.

== Meadows

=== Grasses

Grass text.

=== Flowers

Flower text.

== Forests

Forest text.
"""

ARTICLE = """\
# Short Article

**Author:** Jane Doe
**Tags:** notes

Some thoughts.

## Details

More thoughts.
"""


@pytest.fixture
def settings(tmp_path):
    return Settings(relays_file=tmp_path / "missing.yml", validation_wait_s=0, default_relay=A)


@pytest.fixture
def catalog():
    return RelayCatalog({"default": [A], "favorite-relays": [A, B, C]})


def run(path, *args, **kwargs):
    return publish_document(path, *args, **kwargs)


def test_dry_run_never_touches_the_network(write_doc, settings, out):
    path = write_doc("note.adoc", "= Note\n\nJust one paragraph.\n")
    signer, transport = FakeSigner(), FakeTransport()

    report = run(path, dry_run=True, signer=signer, transport=transport, settings=settings, out=out)

    assert isinstance(report, DryRunReport)
    assert report.success
    assert report.published_events == []
    assert report.total_events == 1
    assert report.to_dict()["published_events"] == []
    assert transport.calls == []
    assert signer.signed == []


def test_dry_run_works_without_collaborators(write_doc, settings):
    report = run(write_doc("guide.adoc", GUIDE), 3, dry_run=True, settings=settings)

    assert report.content_level == 3
    assert report.content_kind == 30041
    assert report.relay_target == "category 'favorite-relays'"
    assert [u["d_tag"] for u in report.publish_order] == [
        "field-guide-preamble",
        "field-guide-meadows-grasses-content",
        "field-guide-meadows-flowers-content",
        "field-guide-forests-content",
        "field-guide-meadows",
        "field-guide",
    ]
    assert (report.content_units, report.index_units) == (4, 2)
    assert report.metadata["authors"] == ["Jane Doe"]
    assert "relays" not in report.metadata


def test_publish_guide(write_doc, settings, catalog, sleep, out):
    signer, transport = FakeSigner(), FakeTransport(reachable={A, B})

    report = run(
        write_doc("guide.adoc", GUIDE), 3,
        signer=signer, transport=transport, settings=settings, catalog=catalog, sleep=sleep, out=out,
    )

    assert isinstance(report, PublishReport)
    assert report.success
    assert report.relays == [A, B]
    assert report.total_published == 6
    assert [e["d_tag"] for e in report.published_events][-1] == "field-guide"
    assert report.view_url == settings.view_url(report.published_events[-1]["event_id"])

    root = signer.signed[-1]
    assert root.kind == 30040
    assert ("summary", "Everything about fields") in root.tags
    assert ("type", "book") in root.tags
    assert ("author", "Jane Doe") in root.tags
    assert len(root.tag_values("a")) == 3

    fetched = [c for c in transport.calls if c[0] == "fetch"]
    assert len(fetched) == 6


def test_partial_acceptance_still_succeeds(write_doc, settings, catalog, sleep, out):
    transport = FakeTransport(reject={B: "blocked", C: "auth-required"})

    report = run(
        write_doc("note.adoc", "= Note\n\nJust one paragraph.\n"),
        signer=FakeSigner(), transport=transport, settings=settings, relays="favorite-relays",
        catalog=catalog, sleep=sleep, out=out,
    )

    assert report.success
    outcome = report.outcomes[0]
    assert outcome.accepted == [A]
    assert len(outcome.warnings) == 2


def test_markdown_becomes_one_longform_article(write_doc, settings, catalog, sleep, out):
    signer = FakeSigner()

    report = run(
        write_doc("article.md", ARTICLE),
        signer=signer, transport=FakeTransport(), settings=settings, catalog=catalog, sleep=sleep, out=out,
    )

    assert report.success
    event = signer.signed[0]
    assert len(signer.signed) == 1
    assert event.kind == 30023
    assert event.tag_values("d") == [("d", "short-article")]
    assert event.tag_values("published_at")
    assert event.tag_values("t") == [("t", "notes")]
    assert "## Details" in event.content
    assert "**Author:**" not in event.content
    assert event.content.startswith("Some thoughts.")


def test_markdown_header_block_after_blank_line(write_doc, settings):
    plan = plan_document(write_doc("article.md", ARTICLE), settings=settings)

    assert plan.metadata["authors"] == ["Jane Doe"]
    assert plan.metadata["tags"] == ["notes"]


def test_markdown_rejects_level_before_parsing(write_doc, settings):
    path = write_doc("broken.md", "no title here\n")
    with pytest.raises(StructuralError, match="Markdown"):
        run(path, 2, dry_run=True, settings=settings)


def test_structural_errors_surface_before_sending(write_doc, settings):
    transport = FakeTransport()
    path = write_doc("two.adoc", "= One\n\ntext\n\n= Two\n")
    with pytest.raises(StructuralError, match="line 5"):
        run(path, signer=FakeSigner(), transport=transport, settings=settings)
    assert transport.calls == []


def test_relays_argument_overrides_metadata(write_doc, settings, catalog, sleep, out):
    transport = FakeTransport()

    report = run(
        write_doc("guide.adoc", GUIDE), 2,
        signer=FakeSigner(), transport=transport, settings=settings, relays=C,
        catalog=catalog, sleep=sleep, out=out,
    )

    assert report.relays == [C]
    assert {c[1] for c in transport.calls if c[0] == "probe"} == {C}


def test_no_reachable_relays(write_doc, settings, catalog, sleep, out):
    transport = FakeTransport(reachable=set())
    with pytest.raises(NoReachableRelaysError):
        run(
            write_doc("guide.adoc", GUIDE), 3,
            signer=FakeSigner(), transport=transport, settings=settings, catalog=catalog,
            sleep=sleep, out=out,
        )
    assert transport.sends() == []


def test_unknown_category_is_fatal(write_doc, settings, catalog, sleep, out):
    with pytest.raises(ConfigurationError, match="Unknown relay category"):
        run(
            write_doc("guide.adoc", GUIDE), relays="nope",
            signer=FakeSigner(), transport=FakeTransport(), settings=settings, catalog=catalog,
            sleep=sleep, out=out,
        )


def test_publishing_requires_collaborators(write_doc, settings):
    with pytest.raises(ConfigurationError, match="signer and a transport"):
        run(write_doc("note.adoc", "= Note\n\ntext\n"), settings=settings)


def test_overlong_title_fails_preflight(write_doc, settings):
    path = write_doc("long.adoc", "= Doc\n\n== " + "T" * 250 + "\n\ntext\n")
    with pytest.raises(ConfigurationError, match="title longer than 200"):
        plan_document(path, 2, settings=settings)


def test_plan_warnings_are_reported(write_doc, settings, out):
    path = write_doc("odd.adoc", "= Doc\n:type: pamphlet\n\n== A\n\nIntro\n\n=== A1\n\nx\n")

    report = run(path, 3, dry_run=True, settings=settings, out=out)

    assert len(report.warnings) == 2
    assert "pamphlet" in out.file.getvalue()
