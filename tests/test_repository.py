# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for RecordRepository — create, find, update, delete, all, history."""

from __future__ import annotations

import pytest
from helpers import STREAM, FakeClock, make_entry

from multichain_records.client.memory import MemoryLogClient
from multichain_records.errors import EncodingError, InvalidArgument, RecordNotFound
from multichain_records.repository import RecordRepository
from multichain_records.types import LogEntry, Record

START = 1_700_000_000


# ---------------------------------------------------------------------------
# TestLifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_create_update_delete_scenario(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a"})
        assert repository.find(record.id) == {"name": "a", "id": record.id}

        repository.update(record, {"name": "b"})
        assert repository.find(record.id) == {"name": "b", "id": record.id}
        history = repository.history(record.id)
        assert len(history) == 2
        assert history[0].attributes == {"name": "a"}
        assert history[1].attributes == {"name": "b", "id": record.id}

        repository.delete(record.id)
        assert repository.find(record.id) is None
        history = repository.history(record.id)
        assert len(history) == 3
        assert history[-1].deleted is True
        assert history[-1].attributes["name"] == "b"

    def test_create_returns_record_with_generated_id(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a"})
        assert isinstance(record, Record)
        assert record.id is not None
        assert record.id.startswith(f"{STREAM}:")
        assert record["name"] == "a"

    def test_ids_are_unique(self, repository: RecordRepository) -> None:
        ids = {repository.create({"n": i}).id for i in range(50)}
        assert len(ids) == 50

    def test_update_merges_attributes(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a", "price": 1})
        updated = repository.update(record, {"price": 2, "colour": "red"})
        assert updated == {"name": "a", "price": 2, "colour": "red", "id": record.id}
        assert record["price"] == 1
        assert repository.find(record.id) == updated

    def test_update_by_id_reads_current_version(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a", "price": 1})
        repository.update(record.id, {"price": 5})
        repository.update(record.id, {"name": "c"})
        assert repository.find(record.id) == {"name": "c", "price": 5, "id": record.id}

    def test_update_of_record_from_all_does_not_publish_derived_fields(
        self, repository: RecordRepository
    ) -> None:
        repository.create({"name": "a"})
        (listed,) = repository.all()
        repository.update(listed, {"name": "b"})
        latest = repository.history(listed.id)[-1].attributes
        assert latest == {"name": "b", "id": listed.id}

    def test_delete_twice_appends_two_tombstones(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a"})
        deleted = repository.delete(record)
        repository.delete(deleted)

        assert repository.find(record.id) is None
        assert repository.all() == []
        history = repository.history(record.id)
        assert [entry.deleted for entry in history] == [False, True, True]

    def test_delete_returns_tombstoned_record(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a"})
        deleted = repository.delete(record)
        assert deleted.deleted is True
        assert deleted["name"] == "a"


# ---------------------------------------------------------------------------
# TestValidation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_create_with_empty_attributes_raises(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        with pytest.raises(InvalidArgument) as exc_info:
            repository.create({})
        assert exc_info.value.code == "INVALID_ARGUMENT"
        assert client.read_all(STREAM) == []

    def test_create_with_unserialisable_attributes_raises(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        with pytest.raises(EncodingError):
            repository.create({"when": object()})
        assert client.read_all(STREAM) == []

    def test_update_with_empty_attributes_raises(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        record = repository.create({"name": "a"})
        with pytest.raises(InvalidArgument):
            repository.update(record, {})
        assert len(client.read_all(STREAM)) == 1

    def test_update_cannot_reassign_id(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a"})
        with pytest.raises(InvalidArgument):
            repository.update(record, {"id": "other"})

    def test_update_of_unknown_id_raises_not_found(self, repository: RecordRepository) -> None:
        with pytest.raises(RecordNotFound) as exc_info:
            repository.update("missing", {"name": "a"})
        assert exc_info.value.record_id == "missing"
        assert exc_info.value.stream == STREAM

    def test_delete_of_deleted_id_raises_not_found(self, repository: RecordRepository) -> None:
        record = repository.create({"name": "a"})
        repository.delete(record)
        with pytest.raises(RecordNotFound):
            repository.delete(record.id)

    @pytest.mark.parametrize("name", ["id", "txid", "created_at", "updated_at"])
    def test_create_rejects_repository_managed_attributes(
        self, repository: RecordRepository, client: MemoryLogClient, name: str
    ) -> None:
        with pytest.raises(InvalidArgument):
            repository.create({"name": "a", name: "x"})
        assert client.read_all(STREAM) == []

    @pytest.mark.parametrize("name", ["txid", "created_at", "updated_at"])
    def test_update_rejects_derived_attributes(
        self, repository: RecordRepository, client: MemoryLogClient, name: str
    ) -> None:
        record = repository.create({"name": "a"})
        with pytest.raises(InvalidArgument):
            repository.update(record, {name: "2020-01-01"})
        assert len(client.read_all(STREAM)) == 1

    def test_every_version_carries_the_entry_key_as_id(
        self, repository: RecordRepository
    ) -> None:
        record = repository.create({"name": "a"})
        record = repository.update(record, {"name": "b"})
        repository.delete(record)
        ids = {entry.attributes.get("id", record.id) for entry in repository.history(record.id)}
        assert ids == {record.id}

    def test_record_without_id_cannot_be_published(self, repository: RecordRepository) -> None:
        with pytest.raises(InvalidArgument):
            repository.delete(Record({"name": "loose"}))

    def test_constructor_rejects_bad_arguments(self, client: MemoryLogClient) -> None:
        with pytest.raises(InvalidArgument):
            RecordRepository(client, stream="")
        with pytest.raises(InvalidArgument):
            RecordRepository(client, stream=STREAM, batch_size=0)


# ---------------------------------------------------------------------------
# TestFind
# ---------------------------------------------------------------------------


class TestFind:
    def test_unknown_id_is_absent(self, repository: RecordRepository) -> None:
        assert repository.find("nope") is None

    def test_unreadable_last_payload_is_absent(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        record = repository.create({"name": "a"})
        client.inject(STREAM, make_entry(record.id, None))
        assert repository.find(record.id) is None

    def test_only_last_entry_is_considered(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        client.inject(STREAM, make_entry("k", {"name": "a", "deleted": True}))
        client.inject(STREAM, make_entry("k", {"name": "revived"}))
        assert repository.find("k") == {"name": "revived", "id": "k"}


# ---------------------------------------------------------------------------
# TestAll
# ---------------------------------------------------------------------------


class TestAll:
    def test_all_excludes_deleted_and_carries_derived_fields(
        self, repository: RecordRepository
    ) -> None:
        kept = repository.create({"name": "kept"})  # START
        gone = repository.create({"name": "gone"})  # START + 10
        repository.update(kept, {"name": "kept-2"})  # START + 20
        repository.delete(gone)  # START + 30

        records = repository.all()
        assert [record.id for record in records] == [kept.id]
        (record,) = records
        assert record["name"] == "kept-2"
        assert record["created_at"] == START
        assert record["updated_at"] == START + 20
        assert record.txid is not None
        assert repository.count() == 1

    def test_all_on_empty_stream(self, repository: RecordRepository) -> None:
        assert repository.all() == []
        assert repository.count() == 0

    def test_all_skips_keyless_entries(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        client.inject(STREAM, make_entry(None, {"name": "orphan"}))
        record = repository.create({"name": "a"})
        assert [r.id for r in repository.all()] == [record.id]

    def test_over_nested_payload_does_not_abort_the_read(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        record = repository.create({"name": "a"})
        nested = ("[" * 100_000 + "]" * 100_000).encode().hex()
        client.inject(STREAM, LogEntry(keys=("k",), data=nested, blocktime=START))
        records = repository.all()
        assert [r.id for r in records] == ["k", record.id]
        assert records[0].payload() == {"id": "k"}
        assert repository.find("k") is None
        assert len(repository.paginate(per_page=5).items) == 2

    def test_streams_are_independent(self, client: MemoryLogClient) -> None:
        products = RecordRepository(client, stream="products")
        orders = RecordRepository(client, stream="orders")
        products.create({"name": "lamp"})
        assert orders.all() == []
        assert products.count() == 1


# ---------------------------------------------------------------------------
# TestHistory
# ---------------------------------------------------------------------------


class TestHistory:
    def test_history_counts_every_append_in_order(self, repository: RecordRepository) -> None:
        record = repository.create({"v": 0})
        for v in range(1, 5):
            record = repository.update(record, {"v": v})
        repository.delete(record)

        history = repository.history(record.id)
        assert len(history) == 6
        assert [entry.attributes.get("v") for entry in history] == [0, 1, 2, 3, 4, 4]
        assert len({entry.txid for entry in history}) == 6
        assert [entry.blocktime for entry in history] == [START + 10 * i for i in range(6)]

    def test_history_of_unknown_id_is_empty(self, repository: RecordRepository) -> None:
        assert repository.history("nope") == []

    def test_history_keeps_unreadable_versions_as_empty(
        self, repository: RecordRepository, client: MemoryLogClient
    ) -> None:
        client.inject(STREAM, make_entry("k", None, txid="t1"))
        (entry,) = repository.history("k")
        assert entry.attributes == {}
        assert entry.txid == "t1"


def test_clock_fixture_is_deterministic(clock: FakeClock) -> None:
    assert clock() == START
    assert clock() == START + 10
