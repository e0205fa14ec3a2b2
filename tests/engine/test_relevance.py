"""Relevance engine tests: ranking, filtering, caching."""

from __future__ import annotations

from datetime import datetime, timezone

from autolink.engine.relevance import RelevanceEngine, rank_candidates

from .conftest import BrokenCache, MemoryCache, MemoryStore, make_candidate, make_document


def _corpus():
    source = make_document(1, "Alpine Hiking", "Alpine hiking trails offer wide views.", categories={1, 2})
    return [
        source,
        make_document(2, "Glacier Walks", "Glacier walks start early.", categories={1, 2}),
        make_document(3, "Mountain Huts", "Mountain huts serve soup.", categories={1}),
        make_document(4, "Ocean Sailing", "Ocean sailing needs wind."),
        make_document(5, "Draft Notes", "Unfinished draft.", categories={1, 2}, status="draft"),
        make_document(6, "About Page", "About the team.", categories={1, 2}, doc_type="page"),
        make_document(7, "Excluded Post", "Never link here.", categories={1, 2}),
        make_document(9, "Summit Snacks", "Summit snacks keep energy up.", categories={2}),
    ]


def test_ranks_eligible_targets_and_drops_zero_scores(engine_config):
    engine_config.raw["exclude_posts"] = [7]
    engine = RelevanceEngine(MemoryStore(_corpus()), config=engine_config)

    results = engine.get_relevant_documents(1, limit=10)

    assert [item.target_id for item in results] == [2, 3, 9]
    assert [item.score for item in results] == [100, 50, 50]
    assert results[0].url == "https://example.com/2/"


def test_limit_defaults_to_link_budget(engine_config):
    engine_config.raw["max_links_per_post"] = 2
    engine = RelevanceEngine(MemoryStore(_corpus()), config=engine_config)
    assert len(engine.get_relevant_documents(1)) == 2
    assert len(engine.get_relevant_documents(1, limit=1)) == 1


def test_missing_source_returns_empty_and_is_not_cached(engine_config):
    cache = MemoryCache()
    engine = RelevanceEngine(MemoryStore(_corpus()), cache=cache, config=engine_config)
    assert engine.get_relevant_documents(404) == []
    assert cache.data == {}


def test_results_are_cached_per_source(engine_config):
    store = MemoryStore(_corpus())
    cache = MemoryCache()
    engine_config.raw["cache_expiration"] = 120
    engine = RelevanceEngine(store, cache=cache, config=engine_config)

    first = engine.get_relevant_documents(1, limit=1)
    second = engine.get_relevant_documents(1, limit=10)

    assert store.queries == 1
    assert [item.target_id for item in first] == [2]
    assert len(second) == len(cache.data["relevant:1"])
    assert cache.timeouts["relevant:1"] == 120


def test_invalidate_forces_recomputation(engine_config):
    store = MemoryStore(_corpus())
    cache = MemoryCache()
    engine = RelevanceEngine(store, cache=cache, config=engine_config)

    engine.get_relevant_documents(1)
    engine.get_relevant_documents(2)
    cache.set("other:1", "keep", 60)

    engine.invalidate(1)
    assert "relevant:1" not in cache.data
    assert "relevant:2" in cache.data

    engine.invalidate_all()
    assert not [key for key in cache.data if key.startswith("relevant:")]
    assert cache.data["other:1"] == "keep"

    engine.get_relevant_documents(1)
    assert store.queries == 3


def test_broken_cache_falls_back_to_computation(engine_config):
    engine = RelevanceEngine(MemoryStore(_corpus()), cache=BrokenCache(), config=engine_config)

    results = engine.get_relevant_documents(1, limit=10)

    assert [item.target_id for item in results][:1] == [2]
    engine.invalidate(1)
    engine.invalidate_all()


def test_parallel_scoring_matches_serial(engine_config):
    documents = [make_document(1, "Hub", "Hub page body.", categories={1, 2, 3})]
    for identifier in range(2, 80):
        categories = {1, 2, 3} if identifier % 3 == 0 else {identifier % 2 + 1}
        documents.append(make_document(identifier, f"Doc {identifier}", "Some text.", categories=categories))

    engine_config.raw["max_workers"] = 1
    serial = RelevanceEngine(MemoryStore(documents), config=engine_config).get_relevant_documents(1, limit=100)

    engine_config.raw["max_workers"] = 4
    engine_config.raw["parallel_threshold"] = 10
    parallel = RelevanceEngine(MemoryStore(documents), config=engine_config).get_relevant_documents(1, limit=100)

    assert [(item.target_id, item.score) for item in parallel] == [(item.target_id, item.score) for item in serial]
    assert serial[0].score == 150


def test_newer_and_older_targets_can_be_excluded(engine_config):
    middle = datetime(2024, 6, 1, tzinfo=timezone.utc)
    documents = [
        make_document(1, "Source", "Body.", categories={1}, published_at=middle),
        make_document(2, "Older", "Body.", categories={1}, published_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        make_document(3, "Newer", "Body.", categories={1}, published_at=datetime(2024, 12, 1, tzinfo=timezone.utc)),
        make_document(4, "Undated", "Body.", categories={1}),
    ]

    engine_config.raw["link_to_newer_posts"] = False
    engine = RelevanceEngine(MemoryStore(documents), config=engine_config)
    assert [item.target_id for item in engine.get_relevant_documents(1, limit=10)] == [2, 4]

    engine_config.raw["link_to_newer_posts"] = True
    engine_config.raw["link_to_older_posts"] = False
    engine = RelevanceEngine(MemoryStore(documents), config=engine_config)
    assert [item.target_id for item in engine.get_relevant_documents(1, limit=10)] == [3, 4]


def test_phrase_overlap_drives_ranking(engine_config):
    documents = [
        make_document(1, "Rustic Sourdough Bread", "Bake rustic sourdough bread at home. Feed the starter daily."),
        make_document(2, "Rustic Sourdough Bread Guide", "Rustic sourdough bread needs a long proof."),
        make_document(3, "Starter Care", "Feed the starter daily with flour."),
        make_document(4, "Sailing", "Ocean sailing needs wind."),
    ]
    engine = RelevanceEngine(MemoryStore(documents), config=engine_config)

    results = engine.get_relevant_documents(1, limit=10)

    assert [item.target_id for item in results] == [2, 3]
    assert "rustic sourdough bread" in results[0].matching_phrases
    assert "feed starter daily" in results[1].matching_phrases


def test_rank_candidates_orders_ties_by_identifier():
    ranked = rank_candidates(
        [
            make_candidate(10, {}, score=5),
            make_candidate(9, {}, score=5),
            make_candidate(3, {}, score=7),
            make_candidate(4, {}, score=0),
        ]
    )
    assert [item.target_id for item in ranked] == [3, 9, 10]
