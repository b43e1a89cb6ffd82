"""Tests for the fixed-window page chunker."""

from __future__ import annotations

import math

import pytest

from groundwork.ingest.chunker import PageChunker, date_properties


def _page(**extra) -> dict:
    page = {"id": "p1", "last_edited_time": "2024-03-05T10:30:00.000Z", "url": "https://x.test/p1"}
    page.update(extra)
    return page


# ------------------------------------------------------------------
# Construction
# ------------------------------------------------------------------


def test_rejects_zero_chunk_size():
    with pytest.raises(ValueError):
        PageChunker(chunk_size=0, overlap=0)


def test_rejects_overlap_not_smaller_than_chunk_size():
    with pytest.raises(ValueError):
        PageChunker(chunk_size=100, overlap=100)


def test_rejects_negative_overlap():
    with pytest.raises(ValueError):
        PageChunker(chunk_size=100, overlap=-1)


# ------------------------------------------------------------------
# Splitting
# ------------------------------------------------------------------


def test_short_text_single_chunk():
    chunks = PageChunker(chunk_size=1000, overlap=200).chunk("short text", "T", _page())
    assert len(chunks) == 1
    assert chunks[0].content == "short text"
    assert chunks[0].metadata.total_chunks == 1


def test_text_exactly_chunk_size_single_chunk():
    chunks = PageChunker(chunk_size=10, overlap=2).chunk("a" * 10, "T", _page())
    assert len(chunks) == 1


def test_blank_text_yields_nothing():
    assert PageChunker().chunk("   \n\t", "T", _page()) == []


def test_window_positions_and_overlap():
    text = "".join(chr(ord("a") + i % 26) for i in range(25))
    chunks = PageChunker(chunk_size=10, overlap=4).chunk(text, "T", _page())
    assert [c.content for c in chunks] == [text[0:10], text[6:16], text[12:22], text[18:25], text[24:25]]


def test_chunk_count_matches_step_formula():
    text = "x" * 2500
    chunks = PageChunker(chunk_size=1000, overlap=200).chunk(text, "T", _page())
    assert len(chunks) == math.ceil(2500 / 800) == 4
    assert all(c.metadata.total_chunks == 4 for c in chunks)


def test_ids_and_indexes_contiguous():
    chunks = PageChunker(chunk_size=10, overlap=0).chunk("y" * 35, "T", _page())
    assert [c.id for c in chunks] == ["p1-0", "p1-1", "p1-2", "p1-3"]
    assert [c.metadata.chunk_index for c in chunks] == [0, 1, 2, 3]


def test_chunks_have_no_embedding():
    chunks = PageChunker().chunk("some text", "T", _page())
    assert chunks[0].embedding is None


# ------------------------------------------------------------------
# Metadata
# ------------------------------------------------------------------


def test_metadata_copied_from_page():
    chunk = PageChunker().chunk("body", "Alpha", _page())[0]
    m = chunk.metadata
    assert m.title == "Alpha"
    assert m.source_id == "p1"
    assert m.last_modified == "2024-03-05T10:30:00.000Z"
    assert m.url == "https://x.test/p1"


def test_missing_id_gets_generated_source_id():
    page = {"last_edited_time": "2024-01-01T00:00:00Z"}
    chunks = PageChunker(chunk_size=5, overlap=0).chunk("0123456789", "T", page)
    source_id = chunks[0].metadata.source_id
    assert source_id.startswith("page-")
    assert chunks[1].metadata.source_id == source_id
    assert chunks[1].id == f"{source_id}-1"


def test_missing_url_is_none():
    chunk = PageChunker().chunk("body", "T", {"id": "p2", "url": ""})[0]
    assert chunk.metadata.url is None


def test_missing_last_edited_falls_back_to_now():
    chunk = PageChunker().chunk("body", "T", {"id": "p2"})[0]
    assert chunk.metadata.last_modified


def test_chunks_do_not_share_properties_dict():
    page = _page(properties={"Due": {"type": "date", "date": {"start": "2024-03-10"}}})
    chunks = PageChunker(chunk_size=5, overlap=0).chunk("0123456789", "T", page)
    chunks[0].metadata.properties["extra"] = "x"
    assert "extra" not in chunks[1].metadata.properties


# ------------------------------------------------------------------
# date_properties
# ------------------------------------------------------------------


def test_date_properties_from_typed_properties():
    page = _page(
        properties={
            "Due": {"type": "date", "date": {"start": "2024-03-10", "end": "2024-03-12"}},
            "Kickoff": {"type": "date", "date": {"start": "2024-02-01"}},
            "Status": {"type": "select", "select": {"name": "Done"}},
            "Empty": {"type": "date", "date": None},
        }
    )
    assert date_properties(page) == {
        "Due": "2024-03-10",
        "Due_end": "2024-03-12",
        "Kickoff": "2024-02-01",
    }


def test_precomputed_metadata_properties_win():
    page = _page(
        metadata={"properties": {"deadline": "2025-01-01"}},
        properties={"Due": {"type": "date", "date": {"start": "2024-03-10"}}},
    )
    assert date_properties(page) == {"deadline": "2025-01-01"}


def test_fifteen_hundred_chars_make_two_chunks():
    text = "".join(str(i % 10) for i in range(1500))
    chunks = PageChunker().chunk(text, "T", _page())
    assert [len(c.content) for c in chunks] == [1000, 700]
    assert chunks[0].content[800:] == chunks[1].content[:200]
