import pytest

from conftest import OCTO_USERS
from typeahead.search.cache import QueryCache


def test_unbounded_cache_keeps_every_query():
	cache = QueryCache()
	for index in range(100):
		cache.set(f"q{index}", OCTO_USERS)

	assert len(cache) == 100
	assert cache.get("q0") == tuple(OCTO_USERS)


def test_keys_are_exact_strings():
	cache = QueryCache()
	cache.set("Octo", OCTO_USERS[:1])

	assert "Octo" in cache
	assert "octo" not in cache
	assert " Octo" not in cache
	assert cache.get("octo") is None


def test_empty_query_never_cached():
	cache = QueryCache()
	with pytest.raises(ValueError):
		cache.set("   ", OCTO_USERS)
	assert len(cache) == 0


def test_capacity_evicts_least_recently_used():
	cache = QueryCache(capacity=2)
	cache.set("a", OCTO_USERS[:1])
	cache.set("b", OCTO_USERS[:2])
	assert cache.get("a") is not None

	cache.set("c", OCTO_USERS)

	assert "a" in cache
	assert "b" not in cache
	assert "c" in cache
	assert len(cache) == 2


def test_invalid_capacity_rejected():
	with pytest.raises(ValueError):
		QueryCache(capacity=0)
