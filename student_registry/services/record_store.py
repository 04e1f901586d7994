from typing import Iterable, List, Tuple

from fastapi import Request

from student_registry.schemas.student_schemas import StudentRecord
from student_registry.utils.logging import get_logger

logger = get_logger()


class RecordStore:
    """
    In-memory, append-only list of student records in insertion order.

    The store does not validate anything. Records coming from the form are
    checked before `append`; records coming from an import are not.
    Duplicates are kept.
    """

    def __init__(self):
        self._records: List[StudentRecord] = []

    def append(self, record: StudentRecord) -> None:
        self._records.append(record)
        logger.debug(f"Stored student {record.code}; store now holds {len(self._records)}")

    def append_many(self, records: Iterable[StudentRecord]) -> int:
        batch = list(records)
        self._records.extend(batch)
        logger.debug(f"Stored {len(batch)} students; store now holds {len(self._records)}")
        return len(batch)

    def all(self) -> Tuple[StudentRecord, ...]:
        return tuple(self._records)

    def count(self) -> int:
        return len(self._records)


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store
