import pytest
from sqlalchemy.exc import SQLAlchemyError

from inventory_cache import CacheEntry, InventoryCache


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(tmp_path, clock):
    c = InventoryCache(str(tmp_path / "cache" / "inventory_cache.db"), clock=clock)
    c.initialize()
    yield c
    c.close()


def _row_count(cache: InventoryCache) -> int:
    session = cache.SessionLocal()
    try:
        return session.query(CacheEntry).count()
    finally:
        session.close()


def test_round_trip(cache):
    cache.insert("player", "profile", "X", ttl=1)
    assert cache.get("player", "profile") == "X"


def test_expired_entry_is_deleted_on_read(cache, clock):
    cache.insert("player", "profile", "X", ttl=1)
    clock.advance(2)

    assert cache.get("player", "profile") is None
    assert _row_count(cache) == 0
    assert cache.get("player", "profile") is None


def test_entry_valid_until_expiration(cache, clock):
    cache.insert("player", "profile", "X", ttl=10)
    clock.advance(10)
    assert cache.get("player", "profile") == "X"


def test_default_ttl_is_one_hour(cache, clock):
    cache.insert("player", "profile", "X")
    clock.advance(59 * 60)
    assert cache.get("player", "profile") == "X"
    clock.advance(2 * 60)
    assert cache.get("player", "profile") is None


def test_insert_overwrites_payload_and_expiration(cache, clock):
    cache.insert("player", "profile", "old", ttl=1)
    cache.insert("player", "profile", "new", ttl=100)
    clock.advance(50)

    assert cache.get("player", "profile") == "new"
    assert _row_count(cache) == 1


def test_key_is_player_and_profile(cache):
    cache.insert("alice", "coop", "alice data")
    cache.insert("bob", "coop", "bob data")

    assert cache.get("alice", "coop") == "alice data"
    assert cache.get("bob", "coop") == "bob data"
    assert cache.get("alice", "other") is None
    assert cache.get("carol", "coop") is None


def test_empty_payload_is_a_hit(cache):
    cache.insert("player", "profile", "")
    assert cache.get("player", "profile") == ""


def test_delete(cache):
    cache.insert("player", "profile", "X")
    assert cache.delete("player", "profile") is True
    assert cache.get("player", "profile") is None
    assert cache.delete("player", "profile") is False


def test_in_memory_database(clock):
    cache = InventoryCache(":memory:", clock=clock)
    cache.initialize()
    cache.insert("player", "profile", "X")
    assert cache.get("player", "profile") == "X"


def test_uninitialized_cache_raises():
    with pytest.raises(RuntimeError):
        InventoryCache(":memory:").get("player", "profile")


def test_storage_errors_propagate(cache):
    cache.engine.dispose()
    with cache.engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE inventory_cache")

    with pytest.raises(SQLAlchemyError):
        cache.insert("player", "profile", "X")
    with pytest.raises(SQLAlchemyError):
        cache.get("player", "profile")
