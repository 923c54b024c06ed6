from arnav.core.cache import FileCache, record_cache_stats


def test_expired_entry_is_a_miss_but_readable_as_stale(monkeypatch, tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=1)

    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 0)
    cache.set("places", "k", [{"name": "A"}], ttl_seconds=1)

    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 100)

    with record_cache_stats() as stats:
        assert cache.get("places", "k") is None
        assert cache.get_stale("places", "k") == [{"name": "A"}]

    assert stats.as_dict() == {"hits": 0, "misses": 1, "expired": 1, "sets": 0, "stale_reads": 1}
    assert cache.get_entry_meta("places", "k") == {"created_at_unix": 0, "ttl_seconds": 1}


def test_ttl_override_on_read(monkeypatch, tmp_path):
    cache = FileCache(tmp_path, enabled=True, default_ttl_seconds=1)

    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 0)
    cache.set("places", "k", [1])
    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 50)

    assert cache.get("places", "k") is None
    assert cache.get("places", "k", ttl_seconds=60) == [1]


def test_file_cache_ignores_corrupt_entries(tmp_path):
    cache = FileCache(tmp_path, enabled=True)
    cache.set("places", "k", [1])
    path = next((tmp_path / "places").glob("*.json"))
    path.write_text("{not json", encoding="utf-8")

    assert cache.get("places", "k") is None
    assert cache.get_stale("places", "k") is None
    assert cache.get_entry_meta("places", "k") is None

    cache.set("places", "k", [2])
    assert cache.get("places", "k") == [2]


def test_disabled_cache_stores_nothing(tmp_path):
    cache = FileCache(tmp_path, enabled=False)

    cache.set("places", "k", {"v": 1})

    assert cache.get("places", "k") is None
    assert cache.get_stale("places", "k") is None
    assert not any(tmp_path.iterdir())
