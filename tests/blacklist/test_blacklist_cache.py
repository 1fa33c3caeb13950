from unittest.mock import MagicMock

import httpx
import pytest

from pageimages.blacklist.cache import BlacklistCache, get_blacklist_cache
from pageimages.blacklist.sources import (
    BlacklistConfigurationError,
    BlacklistSourceFetcher,
    RemoteSourceFetcher,
)

SOURCES = [
    {"kind": "internal", "page": "MediaWiki:Pageimages-blacklist"},
    {"kind": "remote", "url": "https://wiki.example.org/blacklist?action=raw"},
]


def make_cache(cached=None, fetched=None, sources=SOURCES):
    redis_cache = MagicMock()
    redis_cache.get.return_value = cached
    fetcher = MagicMock()
    fetcher.fetch.side_effect = fetched or [["A.jpg", "B.jpg"], ["B.jpg", "C.jpg"]]
    cache = BlacklistCache(cache=redis_cache, fetcher=fetcher, sources=sources, ttl_seconds=900, key="pi:bl")
    return cache, redis_cache, fetcher


def test_miss_fetches_merges_and_stores():
    cache, redis_cache, fetcher = make_cache()

    assert cache.get_blacklist() == frozenset({"A.jpg", "B.jpg", "C.jpg"})

    # Sources are read in declared order
    assert [c.args[0] for c in fetcher.fetch.call_args_list] == SOURCES
    redis_cache.set.assert_called_once_with("pi:bl", ["A.jpg", "B.jpg", "C.jpg"], 900)
    assert cache.fetched_at is not None


def test_result_is_memoized_for_the_process():
    cache, redis_cache, fetcher = make_cache()

    first = cache.get_blacklist()
    second = cache.get_blacklist()

    assert first is second
    redis_cache.get.assert_called_once()
    assert fetcher.fetch.call_count == 2


def test_shared_cache_hit_skips_sources():
    cache, redis_cache, fetcher = make_cache(cached=["X.jpg"])

    assert cache.get_blacklist() == frozenset({"X.jpg"})
    fetcher.fetch.assert_not_called()
    redis_cache.set.assert_not_called()


def test_empty_cached_list_is_a_hit():
    cache, _, fetcher = make_cache(cached=[])

    assert cache.get_blacklist() == frozenset()
    fetcher.fetch.assert_not_called()


def test_configuration_error_is_raised():
    redis_cache = MagicMock()
    redis_cache.get.return_value = None
    fetcher = BlacklistSourceFetcher(MagicMock(), MagicMock())
    cache = BlacklistCache(cache=redis_cache, fetcher=fetcher, sources=[{"kind": "gopher"}])

    with pytest.raises(BlacklistConfigurationError):
        cache.get_blacklist()
    assert cache.entries is None
    redis_cache.set.assert_not_called()


def test_unreachable_remote_source_gives_empty_blacklist():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    redis_cache = MagicMock()
    redis_cache.get.return_value = None
    fetcher = BlacklistSourceFetcher(
        internal=MagicMock(),
        remote=RemoteSourceFetcher(transport=httpx.MockTransport(handler)),
    )
    cache = BlacklistCache(
        cache=redis_cache,
        fetcher=fetcher,
        sources=[{"kind": "remote", "url": "https://unreachable.example.org/"}],
    )

    assert cache.get_blacklist() == frozenset()


def test_purge_drops_both_tiers():
    cache, redis_cache, fetcher = make_cache()
    cache.get_blacklist()

    cache.purge()

    assert cache.entries is None
    redis_cache.delete.assert_called_once_with("pi:bl")


def test_provider_returns_process_wide_instance():
    assert get_blacklist_cache() is get_blacklist_cache()
