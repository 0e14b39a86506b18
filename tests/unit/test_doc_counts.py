import pytest

from entity_search.orchestrators.search.doc_counts import InMemoryDocCountCache


def test_keys_are_lowercased():
    cache = InMemoryDocCountCache({"DataSet": 4})
    cache.set_count("GlossaryTerm", 2)

    assert cache.get_entity_doc_count() == {"dataset": 4, "glossaryterm": 2}


def test_non_empty_entities_keep_insertion_order():
    cache = InMemoryDocCountCache({"user": 1, "chart": 0, "dataset": 9})

    assert cache.get_non_empty_entities() == ["user", "dataset"]


def test_replace_drops_missing_types():
    cache = InMemoryDocCountCache({"user": 1, "chart": 5})
    cache.replace({"dataset": 2})

    assert cache.get_entity_doc_count() == {"dataset": 2}


def test_snapshot_is_a_copy():
    cache = InMemoryDocCountCache({"user": 1})
    snapshot = cache.get_entity_doc_count()
    snapshot["user"] = 0

    assert cache.get_non_empty_entities() == ["user"]


def test_negative_counts_rejected():
    cache = InMemoryDocCountCache()
    with pytest.raises(ValueError):
        cache.set_count("dataset", -1)
    with pytest.raises(ValueError):
        cache.update({"dataset": -1})
