import pytest

from wordfragments.core import MalformedRecord

pytestmark = pytest.mark.anyio


async def test_get_missing_key_returns_none(store):
    assert await store.get("nope") is None
    assert await store.get_versioned("nope") == (None, 0)


async def test_set_overwrites_and_bumps_version(store):
    await store.set("k", "one")
    assert await store.get_versioned("k") == ("one", 1)

    await store.set("k", "two")
    assert await store.get_versioned("k") == ("two", 2)


async def test_values_expire_after_ttl(store, clock):
    await store.set("k", "v", ttl=60)
    clock.advance(seconds=59)
    assert await store.get("k") == "v"

    clock.advance(seconds=1)
    assert await store.get("k") is None


async def test_set_refreshes_ttl(store, clock):
    await store.set("k", "v", ttl=60)
    clock.advance(seconds=50)
    await store.set("k", "v2", ttl=60)
    clock.advance(seconds=50)
    assert await store.get("k") == "v2"


async def test_set_without_ttl_never_expires(store, clock):
    await store.set("k", "v")
    clock.advance(days=365)
    assert await store.get("k") == "v"


async def test_set_if_absent_only_writes_once(store):
    assert await store.set_if_absent("k", "first", ttl=60) is True
    assert await store.set_if_absent("k", "second", ttl=60) is False
    assert await store.get("k") == "first"


async def test_set_if_absent_replaces_expired_value(store, clock):
    await store.set("k", "old", ttl=10)
    clock.advance(seconds=11)

    assert await store.set_if_absent("k", "new", ttl=10) is True
    value, version = await store.get_versioned("k")
    assert value == "new"
    # Reused row keeps counting so stale versions can never match again.
    assert version == 2


async def test_compare_and_set_requires_current_version(store):
    await store.set("k", "a")
    _, version = await store.get_versioned("k")

    assert await store.compare_and_set("k", "b", expected_version=version) is True
    assert await store.compare_and_set("k", "c", expected_version=version) is False
    assert await store.get("k") == "b"


async def test_compare_and_set_with_version_zero_creates(store):
    assert await store.compare_and_set("k", "a", expected_version=0, ttl=5) is True
    assert await store.compare_and_set("k", "b", expected_version=0, ttl=5) is False
    assert await store.get("k") == "a"


async def test_compare_and_set_fails_on_expired_record(store, clock):
    await store.set("k", "a", ttl=5)
    _, version = await store.get_versioned("k")
    clock.advance(seconds=6)

    assert await store.compare_and_set("k", "b", expected_version=version) is False


async def test_incr_by_counts_from_zero(store):
    assert await store.incr_by("count") == 1
    assert await store.incr_by("count", 5) == 6
    assert await store.incr_by("count", -2) == 4
    assert await store.get("count") == "4"


async def test_incr_by_rejects_non_integer_value(store):
    await store.set("count", "lots")
    with pytest.raises(MalformedRecord):
        await store.incr_by("count")


async def test_delete_and_purge(store, clock):
    await store.set("keep", "1")
    await store.set("gone", "2", ttl=1)
    await store.set("doomed", "3")

    await store.delete("doomed")
    clock.advance(seconds=2)

    assert await store.purge_expired() == 1
    assert await store.get("keep") == "1"
    assert await store.get("doomed") is None
