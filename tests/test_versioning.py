"""Tests for the version manager"""

import asyncio

import pytest
from fakeredis import FakeAsyncRedis, FakeServer

from promptura.config import Settings
from promptura.errors import InvalidOperationError, NotFoundError
from promptura.versioning.manager import VersionManager
from promptura.versioning.redis_store import RedisVersionStore
from promptura.versioning.store import InMemoryVersionStore


class YieldingStore(InMemoryVersionStore):
    """In-memory store that hands control back to the loop on every read"""

    async def get_version(self, version_id):
        await asyncio.sleep(0)
        return await super().get_version(version_id)

    async def query_versions(self, prompt_id):
        await asyncio.sleep(0)
        return await super().query_versions(prompt_id)


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return InMemoryVersionStore()
    redis_store = RedisVersionStore(Settings())
    redis_store.redis_client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    return redis_store


@pytest.fixture
def manager(store):
    return VersionManager(store)


async def current_versions(store, prompt_id):
    return [v for v in await store.query_versions(prompt_id) if v.is_current]


@pytest.mark.asyncio
async def test_create_and_get_history(manager):
    await manager.create_version("p1", "T1", "hello")
    await manager.create_version("p1", "T2", "hello world")

    history = await manager.get_history("p1")

    assert history.total_versions == 2
    assert [v.version_number for v in history.versions] == [2, 1]
    assert history.versions[0].is_current is True
    assert history.versions[0].content == "hello world"
    assert history.versions[1].is_current is False
    assert history.versions[1].content == "hello"
    assert history.current_version.version_number == 2


@pytest.mark.asyncio
async def test_history_of_unknown_prompt(manager):
    with pytest.raises(NotFoundError):
        await manager.get_history("missing")


@pytest.mark.asyncio
async def test_recent_changes_are_first_five(manager):
    for i in range(7):
        await manager.create_version("p1", f"T{i}", f"content {i}")

    history = await manager.get_history("p1")

    assert history.total_versions == 7
    assert [v.version_number for v in history.recent_changes] == [7, 6, 5, 4, 3]


@pytest.mark.asyncio
async def test_create_updates_owning_snapshot(manager, store):
    await manager.create_version("p1", "Draft", "first")
    await manager.create_version("p1", "Final", "second")

    snapshot = await store.get_prompt_snapshot("p1")
    assert snapshot.title == "Final"
    assert snapshot.content == "second"


@pytest.mark.asyncio
async def test_create_rejects_blank_content(manager):
    with pytest.raises(InvalidOperationError):
        await manager.create_version("p1", "Title", "   ")
    with pytest.raises(InvalidOperationError):
        await manager.create_version("p1", "", "content")


@pytest.mark.asyncio
async def test_set_current_version(manager, store):
    v1 = await manager.create_version("p1", "T1", "one")
    await manager.create_version("p1", "T2", "two")

    promoted = await manager.set_current_version(v1.id)

    assert promoted.is_current is True
    current = await current_versions(store, "p1")
    assert [v.id for v in current] == [v1.id]
    snapshot = await store.get_prompt_snapshot("p1")
    assert snapshot.content == "one"


@pytest.mark.asyncio
async def test_set_current_unknown_version(manager):
    with pytest.raises(NotFoundError):
        await manager.set_current_version("nope")


@pytest.mark.asyncio
async def test_single_current_invariant(manager, store):
    """Any mix of creates and promotions leaves exactly one current version"""
    created = []
    for i in range(4):
        created.append(await manager.create_version("p1", f"T{i}", f"c{i}"))
        assert len(await current_versions(store, "p1")) == 1

    for version in [created[0], created[2], created[2], created[3], created[1]]:
        await manager.set_current_version(version.id)
        current = await current_versions(store, "p1")
        assert [v.id for v in current] == [version.id]


@pytest.mark.asyncio
async def test_concurrent_writers_keep_single_current(manager, store):
    first = await manager.create_version("p1", "T0", "c0")

    await asyncio.gather(
        manager.create_version("p1", "T1", "c1"),
        manager.set_current_version(first.id),
        manager.create_version("p1", "T2", "c2"),
        manager.set_current_version(first.id),
    )

    versions = await store.query_versions("p1")
    assert len([v for v in versions if v.is_current]) == 1
    assert sorted(v.version_number for v in versions) == [1, 2, 3]


@pytest.mark.asyncio
async def test_prompts_are_independent(manager, store):
    await manager.create_version("p1", "A", "a")
    await manager.create_version("p2", "B", "b")

    assert len(await current_versions(store, "p1")) == 1
    assert len(await current_versions(store, "p2")) == 1
    assert (await manager.get_history("p2")).versions[0].version_number == 1


@pytest.mark.asyncio
async def test_delete_current_version_is_rejected(manager, store):
    await manager.create_version("p1", "T1", "one")
    current = await manager.create_version("p1", "T2", "two")
    before = await store.query_versions("p1")

    with pytest.raises(InvalidOperationError, match="current version"):
        await manager.delete_version(current.id)

    assert await store.query_versions("p1") == before


@pytest.mark.asyncio
async def test_delete_keeps_numbering(manager):
    await manager.create_version("p1", "T1", "one")
    v2 = await manager.create_version("p1", "T2", "two")
    await manager.create_version("p1", "T3", "three")

    await manager.delete_version(v2.id)
    v4 = await manager.create_version("p1", "T4", "four")

    history = await manager.get_history("p1")
    assert [v.version_number for v in history.versions] == [4, 3, 1]
    assert v4.version_number == 4
    with pytest.raises(NotFoundError):
        await manager.get_version(v2.id)


@pytest.mark.asyncio
async def test_delete_unknown_version(manager):
    with pytest.raises(NotFoundError):
        await manager.delete_version("nope")


@pytest.mark.asyncio
async def test_version_numbers_are_not_reused_after_deleting_latest(manager):
    v1 = await manager.create_version("p1", "T1", "one")
    v2 = await manager.create_version("p1", "T2", "two")
    await manager.set_current_version(v1.id)
    await manager.delete_version(v2.id)

    v3 = await manager.create_version("p1", "T3", "three")

    assert v3.version_number == 3


@pytest.mark.asyncio
async def test_branch_from_version(manager):
    v1 = await manager.create_version("p1", "T1", "one")
    await manager.create_version("p1", "T2", "two")

    branch = await manager.branch_from_version(v1.id, "T1b", "one, revised")

    assert branch.parent_version_id == v1.id
    assert branch.version_number == 3
    assert branch.is_current is True
    assert branch.change_description == "Branched from version 1"

    custom = await manager.branch_from_version(v1.id, "T1c", "again", "Try a shorter intro")
    assert custom.change_description == "Try a shorter intro"
    # The parent is untouched
    assert (await manager.get_version(v1.id)).content == "one"


@pytest.mark.asyncio
async def test_diff_between_versions(manager):
    a = await manager.create_version("p1", "A", "a\nb\nc")
    b = await manager.create_version("p1", "B", "a\nx\nc")

    changes = manager.diff(a, b)

    assert [(c.type, c.content, c.line_number) for c in changes] == [
        ("unchanged", "a", 1),
        ("removed", "b", 2),
        ("added", "x", 2),
        ("unchanged", "c", 3),
    ]


@pytest.mark.asyncio
async def test_user_scoping(manager):
    mine = await manager.create_version("p1", "Mine", "text", user_id="alice")

    assert (await manager.get_version(mine.id, user_id="alice")).user_id == "alice"
    with pytest.raises(NotFoundError):
        await manager.get_version(mine.id, user_id="bob")
    with pytest.raises(NotFoundError):
        await manager.get_history("p1", user_id="bob")
    with pytest.raises(NotFoundError):
        await manager.set_current_version(mine.id, user_id="bob")


@pytest.mark.asyncio
async def test_comparisons(manager):
    a = await manager.create_version("p1", "A", "a", user_id="alice")
    b = await manager.create_version("p1", "B", "b", user_id="alice")

    first = await manager.compare_versions(a.id, b.id, "shorter is better", user_id="alice")
    second = await manager.compare_versions(b.id, a.id, user_id="alice")

    comparisons = await manager.get_comparisons(user_id="alice")
    assert [c.id for c in comparisons] == [second.id, first.id]
    assert comparisons[1].comparison_notes == "shorter is better"
    assert await manager.get_comparisons(user_id="bob") == []
    assert len(await manager.get_comparisons(limit=1, user_id="alice")) == 1


@pytest.mark.asyncio
async def test_compare_unknown_version(manager):
    a = await manager.create_version("p1", "A", "a")
    with pytest.raises(NotFoundError):
        await manager.compare_versions(a.id, "missing")


@pytest.mark.asyncio
async def test_promote_racing_delete_keeps_single_current():
    store = YieldingStore()
    manager = VersionManager(store)
    v1 = await manager.create_version("p1", "T1", "one")
    v2 = await manager.create_version("p1", "T2", "two")

    deleted, promoted = await asyncio.gather(
        manager.delete_version(v1.id),
        manager.set_current_version(v1.id),
        return_exceptions=True,
    )

    assert deleted is None
    assert isinstance(promoted, NotFoundError)
    current = await current_versions(store, "p1")
    assert [v.id for v in current] == [v2.id]
    assert (await store.get_prompt_snapshot("p1")).content == "two"


@pytest.mark.asyncio
async def test_cannot_write_to_another_users_prompt(manager, store):
    mine = await manager.create_version("p1", "Mine", "alice text", user_id="alice")

    with pytest.raises(NotFoundError):
        await manager.create_version("p1", "Theirs", "bob text", user_id="bob")

    history = await manager.get_history("p1", user_id="alice")
    assert [v.id for v in history.versions] == [mine.id]
    assert history.current_version.is_current is True
    assert (await store.get_prompt_snapshot("p1")).content == "alice text"


@pytest.mark.asyncio
async def test_branch_into_another_users_prompt_is_rejected(manager):
    mine = await manager.create_version("p1", "Mine", "alice text", user_id="alice")

    with pytest.raises(NotFoundError):
        await manager.branch_from_version(mine.id, "Fork", "bob text", user_id="bob")
