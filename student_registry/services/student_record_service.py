from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from fastapi import Depends

from student_registry.config.settings import settings
from student_registry.formats import CodecRegistry, ExportFormat
from student_registry.schemas.student_schemas import (
    ImportSummary,
    StudentDraft,
    StudentRecord,
)
from student_registry.services.record_store import RecordStore, get_record_store
from student_registry.services.validation_service import validate_record
from student_registry.utils.errors import (
    DecodeError,
    EmptyExportError,
    FieldValidationError,
)
from student_registry.utils.logging import get_logger

logger = get_logger()


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    media_type: str
    content: str


class StudentRecordService:
    """Submit, list, export and import operations over one record store."""

    def __init__(self, store: RecordStore, export_basename: Optional[str] = None):
        self.store = store
        self.export_basename = export_basename or settings.EXPORT_BASENAME

    async def submit(self, draft: StudentDraft) -> StudentRecord:
        """
        Validate every field of the draft and store it as a record.

        Raises:
            FieldValidationError: carrying the message of each failing field.
                Nothing is stored in that case.
        """
        result = validate_record(draft)
        if not result.valid:
            logger.info(f"Rejected student submission, invalid fields: {sorted(result.errors)}")
            raise FieldValidationError(result.errors)

        record = StudentRecord.from_draft(draft)
        self.store.append(record)
        logger.info(f"Student {record.code} registered; {self.store.count()} in store")
        return record

    def list_records(self, page: int = 1, per_page: int = 20) -> Tuple[List[StudentRecord], int]:
        """Return one page of records in insertion order, plus the total count."""
        records = self.store.all()
        start = (page - 1) * per_page
        return list(records[start : start + per_page]), len(records)

    async def export_records(self, export_format: Union[ExportFormat, str]) -> ExportedFile:
        """
        Encode the whole store in the requested format.

        Raises:
            EmptyExportError: if the store holds no records; no encoding is attempted.
            EncodeError: if a stored value cannot be written in the requested format.
        """
        codec = CodecRegistry.get(export_format)
        if self.store.count() == 0:
            raise EmptyExportError()

        records = self.store.all()
        content = codec.encode(records)
        logger.info(f"Exported {len(records)} students as {codec.format.value}")

        return ExportedFile(
            filename=f"{self.export_basename}.{codec.extension}",
            media_type=codec.media_type,
            content=content,
        )

    async def import_file(self, filename: str, payload: bytes) -> ImportSummary:
        """
        Decode an uploaded file and append every record it holds.

        The codec is picked from the file extension. Decoding finishes before
        the store is touched, so a file that fails to decode adds nothing.
        Imported records are not validated; the summary lists the positions
        of those that would have been rejected by the form.
        """
        codec = CodecRegistry.for_filename(filename)

        try:
            text = payload.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeError(f"{filename} is not UTF-8 text: {e}") from e

        records = codec.decode(text)
        imported = self.store.append_many(records)

        invalid_records = [
            position
            for position, record in enumerate(records, start=1)
            if not validate_record(record).valid
        ]
        if invalid_records:
            logger.warning(
                f"Imported {len(invalid_records)} student(s) from {filename} that fail field validation"
            )

        logger.info(f"Imported {imported} students from {filename} ({codec.format.value})")
        return ImportSummary(
            filename=filename,
            format=codec.format.value,
            imported=imported,
            total=self.store.count(),
            invalid_records=invalid_records,
        )


def get_student_record_service(
    store: RecordStore = Depends(get_record_store),
) -> StudentRecordService:
    return StudentRecordService(store, export_basename=settings.EXPORT_BASENAME)
