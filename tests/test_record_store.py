"""
Unit tests for the person record store
"""

import asyncio
import pytest

from social_network.core import GroupKind, PendingRequest, UnknownPersonError
from social_network.persistence import PersonStore


class TestRegistration:
    """Test record creation and lookup"""

    @pytest.mark.asyncio
    async def test_register_creates_once(self):
        store = PersonStore()

        first = await store.register("Steve")
        second = await store.register("STEVE")

        assert first is second
        assert len(store) == 1
        assert "steve" in store

    @pytest.mark.asyncio
    async def test_get_is_case_insensitive(self):
        store = PersonStore()
        record = await store.register("Alex")

        assert store.get("alex") is record
        assert store.find("ALEX") is record

    def test_get_unknown_raises(self):
        store = PersonStore()

        with pytest.raises(UnknownPersonError) as exc_info:
            store.get("Herobrine")

        assert exc_info.value.player_name == "Herobrine"
        assert store.find("Herobrine") is None

    @pytest.mark.asyncio
    async def test_keys_sorted(self):
        store = PersonStore()
        for name in ("zed", "Amy", "mo"):
            await store.register(name)

        assert store.keys() == ["amy", "mo", "zed"]
        assert [r.key for r in store.records()] == ["amy", "mo", "zed"]

    @pytest.mark.asyncio
    async def test_remove(self):
        store = PersonStore()
        await store.register("Steve")

        assert await store.remove("steve") is True
        assert await store.remove("steve") is False
        assert "steve" not in store


class TestFlatFilePersistence:
    """Test JSON file storage"""

    @pytest.mark.asyncio
    async def test_records_survive_reload(self, tmp_path):
        store = PersonStore(str(tmp_path))
        alice = await store.register("Alice")
        alice.add_friend("bob")
        alice.create_child_of("mum")
        alice.ignore("griefer")
        alice.add_request(PendingRequest.outbound(GroupKind.FRIEND, "carol", 60))
        await store.save(alice)

        reloaded = PersonStore(str(tmp_path))
        assert await reloaded.load() == 1

        restored = reloaded.get("alice")
        assert restored.name == "Alice"
        assert restored.friends == {"bob"}
        assert restored.child_of == "mum"
        assert restored.is_ignoring("griefer")
        assert restored.pending_requests == alice.pending_requests

    @pytest.mark.asyncio
    async def test_one_file_per_player(self, tmp_path):
        store = PersonStore(str(tmp_path))
        await store.register("Alice")
        await store.register("Bob")

        assert sorted(p.name for p in tmp_path.glob("*.json")) == ["alice.json", "bob.json"]

    @pytest.mark.asyncio
    async def test_remove_deletes_file(self, tmp_path):
        store = PersonStore(str(tmp_path))
        await store.register("Alice")

        await store.remove("alice")

        assert list(tmp_path.glob("*.json")) == []

    @pytest.mark.asyncio
    async def test_similar_names_keep_separate_files(self, tmp_path):
        store = PersonStore(str(tmp_path))
        await store.register("a b")
        await store.register("a_b")
        assert len(store) == 2

        reloaded = PersonStore(str(tmp_path))

        assert await reloaded.load() == 2
        assert reloaded.keys() == ["a b", "a_b"]
        assert reloaded.get("a b").name == "a b"

    @pytest.mark.asyncio
    async def test_in_memory_store_loads_nothing(self):
        assert await PersonStore().load() == 0


class TestLocking:
    """Test pair locking"""

    @pytest.mark.asyncio
    async def test_locked_serializes_overlapping_pairs(self):
        store = PersonStore()
        order = []

        async def hold(tag, *keys):
            async with store.locked(*keys):
                order.append(f"{tag}-start")
                await asyncio.sleep(0.01)
                order.append(f"{tag}-end")

        await asyncio.gather(hold("ab", "a", "b"), hold("ba", "B", "A"))

        assert order in (
            ["ab-start", "ab-end", "ba-start", "ba-end"],
            ["ba-start", "ba-end", "ab-start", "ab-end"],
        )

    @pytest.mark.asyncio
    async def test_locked_releases_on_error(self):
        store = PersonStore()

        with pytest.raises(RuntimeError):
            async with store.locked("a", "b"):
                raise RuntimeError("boom")

        await asyncio.wait_for(self._acquire(store), timeout=1)

    @staticmethod
    async def _acquire(store):
        async with store.locked("b", "a"):
            pass

    @pytest.mark.asyncio
    async def test_remove_waits_for_lock_holder(self):
        store = PersonStore()
        await store.register("Steve")
        order = []

        async def hold():
            async with store.locked("steve"):
                order.append("held")
                await asyncio.sleep(0.01)
                order.append("released")

        async def remove():
            await asyncio.sleep(0)
            await store.remove("steve")
            order.append("removed")

        await asyncio.gather(hold(), remove())

        assert order == ["held", "released", "removed"]

        async with store.locked("steve"):
            assert "steve" not in store

    @pytest.mark.asyncio
    async def test_locked_same_key_twice(self):
        store = PersonStore()

        await asyncio.wait_for(self._acquire_self(store), timeout=1)

    @staticmethod
    async def _acquire_self(store):
        async with store.locked("a", "A"):
            pass
