import pytest

from conftest import FakeSigner, FakeTransport
from data_model.results import Failed, Published, SkippedDependency
from nostr_io.retry import RetryExecutor
from publisher.orchestrator import Publisher
from publisher.pipeline import plan_document
from validator import EventValidator

A, B, C = "wss://a.example", "wss://b.example", "wss://c.example"

NESTED = """\
= Book
:author: Jane Doe

== A

=== A1

Text a1.

== B

=== B1

Text b1.
"""


@pytest.fixture
def plan(write_doc):
    return plan_document(write_doc("book.adoc", NESTED), 3)


def make_publisher(signer, transport, sleep, out, **kwargs):
    kwargs.setdefault("retry", RetryExecutor(max_retries=1, jitter=False, sleep=sleep, out=out))
    return Publisher(signer, transport, out=out, **kwargs)


def test_publishes_every_unit_in_order(plan, signer, sleep, out):
    transport = FakeTransport()
    report = make_publisher(signer, transport, sleep, out).publish(plan, [A, B])

    assert report.success
    assert [o.d_tag for o in report.outcomes] == [u.d_tag for u in plan.publish_order]
    assert report.total_published == report.total_expected == 5
    assert all(u.event_id for u in plan.units)
    assert [c[2] for c in transport.sends()] == [(A, B)] * 5


def test_index_references_child_event_ids(plan, signer, sleep, out):
    make_publisher(signer, FakeTransport(), sleep, out).publish(plan, [A])

    root = signer.signed[-1]
    by_tag = {u.d_tag: u for u in plan.units}
    assert root.tag_values("d") == [("d", "book")]
    assert [t[3] for t in root.tag_values("a")] == [by_tag["book-a"].event_id, by_tag["book-b"].event_id]
    assert root.tag_values("a")[0][1] == f"30040:{signer.pubkey}:book-a"
    assert root.tag_values("a")[0][2] == A


def test_index_tags_keep_reading_order(write_doc, signer, sleep, out):
    text = "= Doc\n\nIntro.\n\n== A\n\n=== A1\n\nx\n\n== B\n\nText b.\n"
    plan = plan_document(write_doc("mixed.adoc", text), 3)
    order = [u.d_tag for u in plan.publish_order]
    assert order.index("doc-b-content") < order.index("doc-a")

    make_publisher(signer, FakeTransport(), sleep, out).publish(plan, [A])

    root = signer.signed[-1]
    preamble = plan.content_units[0].d_tag
    assert [t[1].split(":")[2] for t in root.tag_values("a")] == [preamble, "doc-a", "doc-b-content"]
    assert [r.position for r in plan.root.references] == [0, 1, 2]


def test_one_acceptance_is_enough(plan, signer, sleep, out):
    transport = FakeTransport(reject={B: "blocked: not on allowlist", C: "rate-limited"})
    report = make_publisher(signer, transport, sleep, out, min_relay_success=1).publish(plan, [A, B, C])

    assert report.success
    first = report.outcomes[0]
    assert isinstance(first, Published)
    assert first.accepted == [A]
    assert first.rejected == {B: "blocked: not on allowlist", C: "rate-limited"}
    assert len(first.warnings) == 2
    assert sleep.delays == []


def test_failure_skips_dependent_indexes(plan, signer, sleep, out):
    transport = FakeTransport(reject_d={"book-a-a1-content"})
    report = make_publisher(signer, transport, sleep, out).publish(plan, [A])

    status = {o.d_tag: type(o) for o in report.outcomes}
    assert status == {
        "book-a-a1-content": Failed,
        "book-b-b1-content": Published,
        "book-a": SkippedDependency,
        "book-b": Published,
        "book": SkippedDependency,
    }
    assert not report.success
    assert report.total_published == 2
    assert "book-a: dependency unresolved: book-a-a1-content" in report.errors
    assert sleep.delays == [2.0]
    assert plan.root.event_id is None


class RefusingSigner(FakeSigner):
    """Refuses to sign the unit with the given d-tag."""

    def __init__(self, d_tag: str) -> None:
        super().__init__()
        self.d_tag = d_tag

    def sign(self, draft):
        if ["d", self.d_tag] in draft.tags:
            raise RuntimeError("signer locked")
        return super().sign(draft)


def test_signing_error_fails_only_that_unit(plan, sleep, out):
    transport = FakeTransport()
    report = make_publisher(RefusingSigner("book-b-b1-content"), transport, sleep, out).publish(plan, [A])

    status = {o.d_tag: type(o) for o in report.outcomes}
    assert status == {
        "book-a-a1-content": Published,
        "book-b-b1-content": Failed,
        "book-a": Published,
        "book-b": SkippedDependency,
        "book": SkippedDependency,
    }
    failed = next(o for o in report.outcomes if isinstance(o, Failed))
    assert failed.reason == "signer locked"
    assert len(transport.sends()) == 2


def test_transient_send_error_is_retried(plan, signer, sleep, out):
    transport = FakeTransport(fail_sends=1)
    report = make_publisher(signer, transport, sleep, out).publish(plan, [A])

    assert report.success
    assert len(transport.sends()) == 6
    assert "connection reset" in out.file.getvalue()


def test_retries_go_only_to_pending_relays(plan, signer, sleep, out):
    transport = FakeTransport(reject={B: "timeout"})
    publisher = make_publisher(signer, transport, sleep, out, min_relay_success=2)
    report = publisher.publish(plan, [A, B])

    first_unit_sends = [c for c in transport.sends() if c[1] == signer.signed[0].id]
    assert [c[2] for c in first_unit_sends] == [(A, B), (B,)]
    assert isinstance(report.outcomes[0], Failed)
    assert "accepted by 1/2" in report.outcomes[0].reason


def test_threshold_is_clamped_to_selected_relays(plan, signer, sleep, out):
    report = make_publisher(signer, FakeTransport(), sleep, out, min_relay_success=5).publish(plan, [A, B])
    assert report.success
    assert "requiring 2" in out.file.getvalue()


def test_validation_runs_against_accepting_relays(plan, signer, sleep, out):
    transport = FakeTransport(reject={B: "blocked"})
    validator = EventValidator(
        transport, retry=RetryExecutor.for_validation(sleep=sleep, out=out), wait_s=0, sleep=sleep, out=out,
    )
    report = make_publisher(signer, transport, sleep, out, validator=validator).publish(plan, [A, B])

    fetches = [c for c in transport.calls if c[0] == "fetch"]
    assert len(fetches) == 5
    assert all(c[2] == A for c in fetches)
    assert all(o.warnings == [f"{B} rejected: blocked"] for o in report.outcomes)


def test_view_url_points_at_root(plan, signer, sleep, out):
    report = make_publisher(
        signer, FakeTransport(), sleep, out, view_url=lambda event_id: f"https://view/{event_id}",
    ).publish(plan, [A])
    assert report.view_url == f"https://view/{plan.root.event_id}"
    assert report.elapsed_s >= 0


def test_no_relays(plan, signer, sleep, out):
    with pytest.raises(ValueError, match="At least one relay"):
        make_publisher(signer, FakeTransport(), sleep, out).publish(plan, [])
