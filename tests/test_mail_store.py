"""
Mail store tests: round-trip, expiry, sweeping.
"""

import asyncio
import uuid

import pytest

from mailrelay.schemas.message import MessageSnapshot
from mailrelay.services.mail_store import MailStore

TTL = 15 * 60


def _snapshot(subject: str = "Hello") -> MessageSnapshot:
    return MessageSnapshot(
        sender="Alice <alice@example.com>",
        recipient="me@mail.example.test",
        subject=subject,
        text="Your code is 123456",
        html=None,
    )


class TestPutGet:

    def test_round_trip(self, store):
        snapshot = _snapshot()
        message_id = store.put(snapshot)
        assert store.get(message_id) == snapshot

    def test_ids_are_unique_uuids(self, store):
        ids = {store.put(_snapshot()) for _ in range(50)}
        assert len(ids) == 50
        for message_id in ids:
            uuid.UUID(message_id)

    def test_unknown_id(self, store):
        assert store.get(str(uuid.uuid4())) is None

    @pytest.mark.parametrize("bad_id", ["", "not-a-uuid", "../../etc/passwd", None, 42, ["x"]])
    def test_malformed_ids_never_raise(self, store, bad_id):
        store.put(_snapshot())
        assert store.get(bad_id) is None

    def test_snapshot_is_immutable(self, store):
        snapshot = _snapshot()
        store.put(snapshot)
        with pytest.raises(Exception):
            snapshot.subject = "changed"

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            MailStore(ttl_seconds=0)


class TestExpiry:

    def test_available_before_ttl(self, store, clock):
        message_id = store.put(_snapshot())
        clock.advance(TTL - 1)
        assert store.get(message_id) is not None

    def test_gone_after_ttl(self, store, clock):
        message_id = store.put(_snapshot())
        clock.advance(TTL)
        assert store.get(message_id) is None
        assert len(store) == 0

    def test_expired_read_leaves_reclaiming_to_sweep(self, store, clock):
        store.put(_snapshot())
        clock.advance(TTL)

        assert len(store) == 0
        assert len(store._entries) == 1
        assert store.sweep() == 1
        assert store._entries == {}

    def test_reads_do_not_extend_lifetime(self, store, clock):
        message_id = store.put(_snapshot())
        for _ in range(14):
            clock.advance(60)
            assert store.get(message_id) is not None
        clock.advance(60)
        assert store.get(message_id) is None

    def test_entries_expire_independently(self, store, clock):
        first = store.put(_snapshot("first"))
        clock.advance(10 * 60)
        second = store.put(_snapshot("second"))
        clock.advance(5 * 60)

        assert store.get(first) is None
        assert store.get(second).subject == "second"
        assert second in store
        assert first not in store


class TestSweep:

    def test_sweep_removes_only_expired(self, store, clock):
        old_ids = [store.put(_snapshot()) for _ in range(3)]
        clock.advance(TTL - 30)
        fresh_id = store.put(_snapshot())
        clock.advance(30)

        assert store.sweep() == 3
        assert store.sweep() == 0
        assert len(store) == 1
        assert store.get(fresh_id) is not None
        for message_id in old_ids:
            assert store.get(message_id) is None

    def test_sweep_on_empty_store(self, store):
        assert store.sweep() == 0

    @pytest.mark.asyncio
    async def test_sweeper_runs_until_cancelled(self, store, clock):
        store.put(_snapshot())
        clock.advance(TTL)

        task = asyncio.create_task(store.run_sweeper(0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert store._entries == {}
