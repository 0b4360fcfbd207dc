"""Unit tests for SnapshotStore."""

import asyncio
import threading
from dataclasses import replace

import pytest

from companion.data_models.home import HomeSnapshot, Match
from companion.services.snapshot_store import SnapshotStore


def add_coins(amount):
    return lambda s: replace(s, coin_balance=s.coin_balance + amount)


class TestSnapshotStoreUpdates:

    def test_starts_empty(self):
        snapshot = SnapshotStore().current()

        assert snapshot == HomeSnapshot()
        assert snapshot.display_name == ""
        assert snapshot.avatar_ref is None
        assert snapshot.friend_count == 0
        assert snapshot.match_count == 0
        assert snapshot.matches == ()
        assert snapshot.profile_loading is False
        assert snapshot.matches_loading is False
        assert snapshot.last_error is None

    def test_update_replaces_value(self):
        store = SnapshotStore()
        before = store.current()

        returned = store.update(add_coins(5))

        assert returned is store.current()
        assert store.current().coin_balance == 5
        assert before.coin_balance == 0

    def test_update_sees_latest_value(self):
        store = SnapshotStore(HomeSnapshot(friend_count=2))
        store.update(lambda s: replace(s, friend_count=s.friend_count * 10))
        store.update(lambda s: replace(s, friend_count=s.friend_count + 1))

        assert store.current().friend_count == 21

    def test_concurrent_updates_are_serialized(self):
        store = SnapshotStore()

        def worker():
            for _ in range(200):
                store.update(add_coins(1))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.current().coin_balance == 1600

    def test_to_dict(self):
        snapshot = HomeSnapshot(
            display_name="Ana",
            match_count=1,
            matches=(Match(id=1, played_at="01/01/2024", duration_label="05:00", role_label="Asesino"),)
        )

        data = snapshot.to_dict()

        assert data['display_name'] == "Ana"
        assert data['matches'] == [
            {'id': 1, 'played_at': "01/01/2024", 'duration_label': "05:00", 'role_label': "Asesino"}
        ]


class TestSnapshotStoreSubscriptions:

    @pytest.mark.asyncio
    async def test_subscription_starts_with_current_value(self):
        store = SnapshotStore(HomeSnapshot(display_name="Ana"))
        stream = store.subscribe()

        first = await stream.__anext__()
        await stream.aclose()

        assert first.display_name == "Ana"

    @pytest.mark.asyncio
    async def test_updates_arrive_in_order(self):
        store = SnapshotStore()
        stream = store.subscribe()
        await stream.__anext__()

        for amount in (1, 2, 3):
            store.update(add_coins(amount))

        received = [(await stream.__anext__()).coin_balance for _ in range(3)]
        await stream.aclose()

        assert received == [1, 3, 6]

    @pytest.mark.asyncio
    async def test_each_subscription_is_independent(self):
        store = SnapshotStore()
        early = store.subscribe()
        await early.__anext__()
        store.update(add_coins(10))

        late = store.subscribe()
        late_first = await late.__anext__()
        store.update(add_coins(1))

        assert late_first.coin_balance == 10
        assert (await late.__anext__()).coin_balance == 11
        assert (await early.__anext__()).coin_balance == 10
        assert (await early.__anext__()).coin_balance == 11
        assert store.subscriber_count == 2

        await early.aclose()
        await late.aclose()
        assert store.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_update_from_another_thread_is_delivered(self):
        store = SnapshotStore()
        stream = store.subscribe()
        await stream.__anext__()

        await asyncio.to_thread(store.update, add_coins(7))
        received = await asyncio.wait_for(stream.__anext__(), timeout=1.0)
        await stream.aclose()

        assert received.coin_balance == 7

    @pytest.mark.asyncio
    async def test_mixed_thread_updates_arrive_in_application_order(self):
        store = SnapshotStore()
        stream = store.subscribe()
        await stream.__anext__()

        worker = threading.Thread(target=store.update, args=(lambda s: replace(s, coin_balance=1),))
        worker.start()
        worker.join()
        store.update(lambda s: replace(s, coin_balance=2))

        received = [(await asyncio.wait_for(stream.__anext__(), timeout=1.0)).coin_balance for _ in range(2)]
        await stream.aclose()

        assert received == [1, 2]
        assert store.current().coin_balance == received[-1]
