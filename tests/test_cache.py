import os
import time

from go2web.cache import ResponseCache, cache_key


def test_store_then_lookup_returns_same_bytes(cache):
    assert cache.store("http://example.com/a?b=1", b"hello") is True
    assert cache.lookup("http://example.com/a?b=1") == b"hello"


def test_lookup_of_unknown_url_is_a_miss(cache):
    assert cache.lookup("http://example.com/nothing") is None


def test_empty_body_is_still_a_hit(cache):
    cache.store("http://example.com/empty", b"")
    assert cache.lookup("http://example.com/empty") == b""


def test_stale_entry_is_a_miss(cache):
    url = "http://example.com/old"
    cache.store(url, b"old")
    two_hours_ago = time.time() - 7200
    os.utime(cache.path_for(url), (two_hours_ago, two_hours_ago))
    assert cache.lookup(url) is None


def test_stale_entry_is_overwritten_by_next_store(cache):
    url = "http://example.com/old"
    cache.store(url, b"old")
    two_hours_ago = time.time() - 7200
    os.utime(cache.path_for(url), (two_hours_ago, two_hours_ago))
    cache.store(url, b"new")
    assert cache.lookup(url) == b"new"


def test_expiry_follows_ttl(tmp_path, monkeypatch):
    cache = ResponseCache(cache_dir=str(tmp_path), ttl=10)
    cache.store("http://example.com/", b"x")
    now = time.time()
    monkeypatch.setattr(time, "time", lambda: now + 11)
    assert cache.lookup("http://example.com/") is None


def test_cache_key_is_flat_and_deterministic():
    key = cache_key("https://example.com/a/b?q=1&r=ü")
    assert key == cache_key("https://example.com/a/b?q=1&r=ü")
    assert key == "https___example.com_a_b_q_1_r__"
    assert "/" not in key


def test_distinct_urls_get_distinct_keys():
    assert cache_key("http://a.com/x") != cache_key("http://a.com/y")


def test_store_failure_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    cache = ResponseCache(cache_dir=str(blocker / "cache"))
    assert cache.store("http://example.com/", b"body") is False
    assert cache.lookup("http://example.com/") is None


def test_directory_created_on_first_store(tmp_path):
    cache_dir = tmp_path / "nested" / "cache"
    cache = ResponseCache(cache_dir=str(cache_dir))
    assert not cache_dir.exists()
    cache.store("http://example.com/", b"body")
    assert cache_dir.is_dir()
