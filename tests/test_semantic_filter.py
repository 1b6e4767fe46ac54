"""Tests for the semantic filter adapter."""

from __future__ import annotations

import asyncio

from conftest import make_record

from recruiteros.search.semantic_filter import SemanticFilterAdapter, summarize, visible


def _records():
    return [make_record(name=n, record_id=n.lower()) for n in ("Cy", "Bo", "Al")]


def test_blank_query_means_no_filter(fake_provider) -> None:
    provider = fake_provider(filter_result=[])
    adapter = SemanticFilterAdapter(provider)
    assert asyncio.run(adapter.filter("", _records())) is None
    assert asyncio.run(adapter.filter("   ", _records())) is None
    assert provider.filter_calls == []


def test_matches_are_returned(fake_provider) -> None:
    provider = fake_provider(filter_result=["al", "cy"])
    ids = asyncio.run(SemanticFilterAdapter(provider).filter("python people", _records()))
    assert sorted(ids) == ["al", "cy"]
    query, summaries = provider.filter_calls[0]
    assert query == "python people"
    assert [s["id"] for s in summaries] == ["cy", "bo", "al"]


def test_empty_match_is_not_no_filter(fake_provider) -> None:
    ids = asyncio.run(SemanticFilterAdapter(fake_provider(filter_result=[])).filter("rust", _records()))
    assert ids == []


def test_failure_fails_open(fake_provider) -> None:
    records = _records()
    ids = asyncio.run(SemanticFilterAdapter(fake_provider(filter_error=True)).filter("anything", records))
    assert sorted(ids) == sorted(r.id for r in records)


def test_unknown_ids_are_discarded(fake_provider) -> None:
    provider = fake_provider(filter_result=["bo", "invented"])
    assert asyncio.run(SemanticFilterAdapter(provider).filter("bo", _records())) == ["bo"]


def test_no_records_skips_service(fake_provider) -> None:
    provider = fake_provider()
    assert asyncio.run(SemanticFilterAdapter(provider).filter("python", [])) == []
    assert provider.filter_calls == []


def test_summary_projection_excludes_analysis() -> None:
    summary = summarize(make_record(name="Al", record_id="al", score=91))
    assert set(summary) == {"id", "name", "score", "tags", "summary"}
    assert summary["score"] == 91
    assert summary["tags"][0] == {"label": "Ex-Startup", "color": "green", "type": "strength"}


def test_visible_follows_store_order() -> None:
    records = _records()
    assert [r.id for r in visible(records, ["al", "cy"])] == ["cy", "al"]
    assert visible(records, None) == records
    assert visible(records, []) == []


def test_malformed_response_fails_open(fake_provider) -> None:
    class NoneFilter(fake_provider):
        async def filter_candidates(self, query, summaries):
            return None

    class UnhashableFilter(fake_provider):
        async def filter_candidates(self, query, summaries):
            return [["al"]]

    records = _records()
    for provider in (NoneFilter(), UnhashableFilter()):
        ids = asyncio.run(SemanticFilterAdapter(provider).filter("python", records))
        assert ids == [r.id for r in records]
