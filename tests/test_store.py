"""Tests for tock.timeline.store — the append-only command log."""

from __future__ import annotations

import pytest

from tests.conftest import make_command
from tock._errors import DuplicateCommandError
from tock.timeline.store import CommandStore, StoreChange


class TestAppend:
    """CommandStore.append / extend."""

    def test_assigns_monotonic_ids(self, store: CommandStore) -> None:
        first = store.append(make_command())
        second = store.append(make_command())
        assert first.message_id == 1
        assert second.message_id == 2

    def test_keeps_explicit_ids(self, store: CommandStore) -> None:
        stored = store.append(make_command(message_id=42))
        assert stored.message_id == 42
        assert store.append(make_command()).message_id == 43

    def test_preserves_arrival_order(self, store: CommandStore) -> None:
        store.extend([make_command("a"), make_command("b"), make_command("c")])
        assert [c.type for c in store.snapshot()] == ["a", "b", "c"]

    def test_duplicate_id_rejected_and_store_unchanged(self, store: CommandStore) -> None:
        store.append(make_command(message_id=1))
        with pytest.raises(DuplicateCommandError):
            store.append(make_command("other", message_id=1))
        assert len(store) == 1
        assert store.snapshot()[0].type == "log"

    def test_extend_is_all_or_nothing(self, store: CommandStore) -> None:
        store.append(make_command(message_id=5))
        with pytest.raises(DuplicateCommandError):
            store.extend([make_command(message_id=6), make_command(message_id=5)])
        assert [c.message_id for c in store.snapshot()] == [5]

    def test_extend_rejects_duplicates_within_batch(self, store: CommandStore) -> None:
        with pytest.raises(DuplicateCommandError):
            store.extend([make_command(message_id=1), make_command(message_id=1)])
        assert len(store) == 0

    def test_extend_auto_ids_skip_explicit_ids_later_in_batch(self, store: CommandStore) -> None:
        batch = store.extend([make_command(), make_command(message_id=1)])
        assert [c.message_id for c in batch] == [2, 1]
        assert store.append(make_command()).message_id == 3

    def test_stored_command_unaffected_by_source_mutation(self, store: CommandStore) -> None:
        payload = {"message": "a"}
        store.append(make_command("log", payload))
        payload["message"] = "changed"
        assert store.snapshot()[0].payload == {"message": "a"}

    def test_extend_mixes_auto_and_explicit_ids(self, store: CommandStore) -> None:
        batch = store.extend([make_command(), make_command(message_id=10), make_command()])
        ids = [c.message_id for c in batch]
        assert len(set(ids)) == 3
        assert ids[1] == 10


class TestClear:
    def test_clear_empties_and_counts(self, store: CommandStore) -> None:
        store.extend([make_command(), make_command()])
        assert store.clear() == 2
        assert len(store) == 0

    def test_ids_keep_increasing_after_clear(self, store: CommandStore) -> None:
        store.extend([make_command(), make_command()])
        store.clear()
        assert store.append(make_command()).message_id == 3

    def test_explicit_id_not_reusable_after_clear(self, store: CommandStore) -> None:
        store.append(make_command(message_id=5))
        store.clear()
        with pytest.raises(DuplicateCommandError):
            store.append(make_command(message_id=5))
        assert len(store) == 0


class TestReaders:
    def test_snapshot_is_immutable_view(self, store: CommandStore) -> None:
        store.append(make_command())
        snapshot = store.snapshot()
        store.append(make_command())
        store.clear()
        assert len(snapshot) == 1

    def test_of_type(self, mixed_store: CommandStore) -> None:
        logs = mixed_store.of_type("log")
        assert [c.payload["message"] for c in logs] == ["app started", "Slow render"]

    def test_get(self, mixed_store: CommandStore) -> None:
        assert mixed_store.get(2).type == "api.response"  # type: ignore[union-attr]
        assert mixed_store.get(99) is None


class TestListeners:
    def test_notified_on_append_and_clear(self, store: CommandStore) -> None:
        changes: list[StoreChange] = []
        store.subscribe(changes.append)
        stored = store.append(make_command())
        store.clear()
        assert changes == [
            StoreChange(kind="append", commands=(stored,)),
            StoreChange(kind="clear", removed=1),
        ]

    def test_extend_notifies_once(self, store: CommandStore) -> None:
        changes: list[StoreChange] = []
        store.subscribe(changes.append)
        store.extend([make_command(), make_command()])
        assert len(changes) == 1
        assert len(changes[0].commands) == 2

    def test_failing_listener_does_not_break_store(
        self, store: CommandStore, capsys: pytest.CaptureFixture[str]
    ) -> None:
        seen: list[StoreChange] = []

        def broken(_change: StoreChange) -> None:
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)
        store.append(make_command())
        assert len(store) == 1
        assert len(seen) == 1
        assert "boom" in capsys.readouterr().err

    def test_unsubscribe(self, store: CommandStore) -> None:
        changes: list[StoreChange] = []
        store.subscribe(changes.append)
        store.unsubscribe(changes.append)
        store.append(make_command())
        assert changes == []
