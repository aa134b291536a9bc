from collections import Counter

import pytest

from data_model.documents import Dialect
from data_model.errors import StructuralError
from data_model.kinds import EventKind
from data_model.units import UnitKind
from doc_parser.parser import parse_document
from hierarchy.builder import build_units
from hierarchy.resolver import resolve_publish_order

CONTENT = EventKind.PUBLICATION_CONTENT

NESTED = """\
= Book

== A

=== A1

Text a1.

== B

=== B1

Text b1.
"""

PARTIAL = """\
= Book

== A

=== A1

Text a1.

== B

Text b.
"""


def build(text, level, dialect=Dialect.ASCIIDOC, kind=CONTENT):
    return build_units(parse_document(text, dialect), level, kind)


def test_title_and_preamble_only_is_one_unit():
    result = build("= Note\n\nJust one paragraph.\n", 0)

    assert len(result.content_units) == 1
    assert result.index_units == []
    assert result.root is None
    unit = result.content_units[0]
    assert unit.d_tag == "note"
    assert unit.is_root
    assert unit.body == "Just one paragraph."
    assert len(resolve_publish_order(result.units)) == 1


def test_two_chapters_with_subsections():
    result = build(NESTED, 3)

    assert [u.d_tag for u in result.content_units] == ["book-a-a1-content", "book-b-b1-content"]
    assert [u.d_tag for u in result.index_units] == ["book-a", "book-b", "book"]
    assert len(result.units) == 5
    assert result.root is result.index_units[-1]
    assert [r.d_tag for r in result.root.references] == ["book-a", "book-b"]

    order = [u.d_tag for u in resolve_publish_order(result.units)]
    assert order.index("book-a-a1-content") < order.index("book-a")
    assert order.index("book-b-b1-content") < order.index("book-b")
    assert order.index("book-a") < order.index("book")
    assert order.index("book-b") < order.index("book")


def test_chapter_without_subsection_becomes_content():
    result = build(PARTIAL, 3)

    assert len(result.units) == 4
    assert [u.d_tag for u in result.content_units] == ["book-a-a1-content", "book-b-content"]
    assert [u.d_tag for u in result.index_units] == ["book-a", "book"]
    assert result.content_units[1].body == "Text b."


def test_level_one_is_flat():
    result = build("= Doc\n\nIntro.\n\n== S\n\nBody.\n", 1)
    assert len(result.units) == 1
    assert result.content_units[0].body == "Intro.\n\n== S\n\nBody."


def test_content_unit_carries_descendants():
    result = build("= Doc\n\n== A\n\nIntro A\n\n=== A1\n\nx\n", 2)
    unit = result.content_units[0]
    assert unit.d_tag == "doc-a-content"
    assert unit.body == "Intro A\n\n=== A1\n\nx"


def test_markdown_descendants_keep_markdown_headers():
    result = build("# Doc\n\n## A\n\nIntro\n\n### A1\n\nx\n", 2, Dialect.MARKDOWN, EventKind.LONGFORM)
    unit = result.content_units[0]
    assert unit.body == "Intro\n\n### A1\n\nx"
    assert unit.event_kind is EventKind.LONGFORM


def test_preamble_unit_comes_first():
    result = build("= Doc\n\nWelcome.\n\n== A\n\nText.\n", 2)
    preamble = result.content_units[0]
    assert preamble.d_tag == "doc-preamble"
    assert preamble.title == "Preamble"
    assert result.root.references[0].d_tag == "doc-preamble"
    assert [r.position for r in result.root.references] == [0, 1]


def test_index_text_before_subsections_is_reported():
    result = build("= Doc\n\n== A\n\nIntro\n\n=== A1\n\nx\n", 3)
    assert [u.kind for u in result.units] == [UnitKind.CONTENT, UnitKind.INDEX, UnitKind.INDEX]
    assert len(result.warnings) == 1
    assert "'A'" in result.warnings[0]


def test_empty_sections_are_dropped():
    result = build("= Doc\n\n== Empty\n\n== Full\n\ntext\n", 2)
    assert [u.d_tag for u in result.content_units] == ["doc-full-content"]


def test_skipped_level_becomes_content_under_nearest_index():
    result = build("# Doc\n\n## Two\n\n#### Four\n\nbody\n", 3, Dialect.MARKDOWN)
    assert [u.d_tag for u in result.content_units] == ["doc-two-four-content"]
    assert [u.d_tag for u in result.index_units] == ["doc-two", "doc"]


def test_duplicate_titles_get_distinct_keys():
    result = build("= Doc\n\n== Same\n\none\n\n== Same\n\ntwo\n", 2)
    assert [u.d_tag for u in result.content_units] == ["doc-same-content", "doc-same-content-2"]


def test_every_unit_is_referenced_once():
    text = (
        "= Manual\n\nIntro.\n\n"
        "== Install\n\n=== Linux\n\nl\n\n=== Mac\n\nm\n\n"
        "== Use\n\n=== Basics\n\n==== Start\n\ns\n\n=== Advanced\n\na\n\n"
        "== FAQ\n\nq\n"
    )
    result = build(text, 3)
    tags = [u.d_tag for u in result.units]
    assert len(tags) == len(set(tags))

    referenced = Counter(r.d_tag for u in result.index_units for r in u.references)
    for unit in result.units:
        expected = 0 if unit is result.root else 1
        assert referenced[unit.d_tag] == expected
        assert unit.d_tag.startswith("manual")


@pytest.mark.parametrize("text, level", [("= Doc\n\n== Empty\n", 2), ("= Doc\n", 0)])
def test_nothing_to_publish(text, level):
    with pytest.raises(StructuralError, match="no content"):
        build(text, level)


def test_level_out_of_range():
    with pytest.raises(StructuralError, match="between 0 and 6"):
        build(NESTED, 7)
