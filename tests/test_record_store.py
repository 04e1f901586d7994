import pytest
from pydantic import ValidationError

from student_registry.schemas.student_schemas import StudentRecord
from student_registry.services.record_store import RecordStore

from conftest import ANA_GOMEZ


class TestRecordStore:
    """Append-only in-memory store."""

    def test_starts_empty(self, record_store):
        assert record_store.count() == 0
        assert record_store.all() == ()

    def test_keeps_insertion_order(self, record_store, sample_records):
        for record in sample_records:
            record_store.append(record)

        assert record_store.all() == tuple(sample_records)
        assert record_store.count() == 3

    def test_duplicates_are_kept(self, record_store, sample_records):
        record_store.append(sample_records[0])
        record_store.append(sample_records[0])

        assert record_store.count() == 2

    def test_append_many_appends_after_existing(self, record_store, sample_records):
        record_store.append(sample_records[2])

        added = record_store.append_many(sample_records[:2])

        assert added == 2
        assert record_store.all() == (sample_records[2], sample_records[0], sample_records[1])

    def test_does_not_validate(self, record_store):
        record_store.append_many([StudentRecord.model_validate({**ANA_GOMEZ, "code": "abc"})])

        assert record_store.all()[0].code == "abc"

    def test_all_is_a_snapshot(self, record_store, sample_records):
        record_store.append(sample_records[0])
        snapshot = record_store.all()

        record_store.append(sample_records[1])

        assert len(snapshot) == 1
        assert record_store.count() == 2

    def test_records_are_immutable(self, sample_records):
        with pytest.raises(ValidationError):
            sample_records[0].code = "99999999"

    def test_has_no_removal_operations(self):
        assert not hasattr(RecordStore, "remove")
        assert not hasattr(RecordStore, "clear")
